from formschema.exceptions import (
    DuplicateRecordError,
    MetadataSourceError,
    PackageError,
    PdfScanError,
    PersistenceError,
    SchemaStoreError,
    SchemaValidationError,
    SettingsError,
)


def test_root_exception_hierarchy() -> None:
    assert issubclass(SettingsError, PackageError)
    assert issubclass(SchemaStoreError, PackageError)
    assert issubclass(MetadataSourceError, PackageError)
    assert issubclass(PdfScanError, PackageError)
    assert issubclass(DuplicateRecordError, PersistenceError)


def test_error_messages() -> None:
    assert str(SchemaValidationError(errors=["a", "b"])) == "Schema validation failed: a; b"
    assert str(MetadataSourceError(message="Cannot read metadata", path="x.json")) == "Cannot read metadata (x.json)"
    assert str(DuplicateRecordError(message="Category already exists", key="sc")) == "Category already exists: sc"
