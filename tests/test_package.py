"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import envstruct

    assert envstruct.__version__


def test_public_api() -> None:
    """Verify the public API is exported."""
    from envstruct import (
        SKIP,
        U32,
        BindError,
        InvalidValueError,
        MissingVariableError,
        SchemaError,
        load,
        load_env_file,
        load_from_map,
    )

    assert SKIP == "-"
    assert issubclass(MissingVariableError, BindError)
    assert issubclass(InvalidValueError, BindError)
    assert issubclass(BindError, ValueError)
    assert issubclass(SchemaError, TypeError)
    assert U32 is not None
    assert load is not None
    assert load_from_map is not None
    assert load_env_file is not None
