"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass
class SchemaStoreError(PackageError):
    """Raised when schema loading/saving constraints are violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class SchemaValidationError(PackageError):
    """Raised when a form schema document has blocking validation errors."""

    errors: list[str] = field(default_factory=list)
    message: str = "Schema validation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"


@dataclass(frozen=True)
class MetadataSourceError(PackageError):
    """Raised when the form metadata source cannot be read or parsed."""

    message: str
    path: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} ({self.path})" if self.path else self.message


@dataclass(frozen=True)
class PersistenceError(PackageError):
    """Raised when the form repository cannot store a record."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class DuplicateRecordError(PersistenceError):
    """Raised when a record with the same unique key already exists."""

    key: str = ""

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.key}" if self.key else self.message


@dataclass(frozen=True)
class PdfScanError(PackageError):
    """Raised when AcroForm fields cannot be read from a PDF."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
