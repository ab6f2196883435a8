"""PDF template directory: existence checks and copying imported forms."""

from __future__ import annotations

import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from formschema.logging import get_logger

logger = get_logger(__name__)


class TemplateDirectoryLocator:
    """`PdfLocator` backed by a directory of PDF templates."""

    def __init__(self, *directories: Path) -> None:
        """Initialize locator.

        Args:
            *directories (Path): Directories searched in order.
        """
        self._directories = [Path(directory) for directory in directories]

    def pdf_exists(self, pdf_filename: str) -> bool:
        """Return whether the PDF exists in any directory (case-insensitive name match).

        Args:
            pdf_filename (str): PDF file name.

        Returns:
            bool: True when found.
        """
        return self.find(pdf_filename) is not None

    def find(self, pdf_filename: str) -> Path | None:
        """Return the path of a PDF template, if present.

        Args:
            pdf_filename (str): PDF file name.

        Returns:
            Path | None: Located file.
        """
        for directory in self._directories:
            direct = directory / pdf_filename
            if direct.is_file():
                return direct
            lowered = directory / pdf_filename.lower()
            if lowered.is_file():
                return lowered
        return None


class CopyError(BaseModel):
    """Failure to copy one template."""

    model_config = ConfigDict(extra="forbid")

    filename: str
    message: str


class TemplateCopier(BaseModel):
    """Copy source PDFs into the template directory, skipping unchanged files."""

    model_config = ConfigDict(extra="forbid")

    source_dir: Path
    target_dir: Path
    copied: int = 0
    skipped: int = 0
    errors: list[CopyError] = Field(default_factory=list)

    def copy_all(self, filenames: list[str]) -> None:
        """Copy every named PDF.

        Args:
            filenames (list[str]): PDF file names relative to the source directory.
        """
        self.target_dir.mkdir(parents=True, exist_ok=True)
        for filename in filenames:
            self.copy_one(filename)
        logger.info(
            "PDF templates copied",
            extra={"copied": self.copied, "skipped": self.skipped, "errors": len(self.errors)},
        )

    def copy_one(self, filename: str) -> bool:
        """Copy one PDF unless an identical-size copy already exists.

        Args:
            filename (str): PDF file name.

        Returns:
            bool: True when the file was copied.
        """
        source = self.source_dir / filename
        target = self.target_dir / filename.lower()
        if not source.is_file():
            self.errors.append(CopyError(filename=filename, message=f"Source PDF not found: {source}"))
            return False
        if target.is_file() and target.stat().st_size == source.stat().st_size:
            self.skipped += 1
            return False
        try:
            shutil.copy2(source, target)
        except OSError as exc:
            self.errors.append(CopyError(filename=filename, message=str(exc)))
            return False
        self.copied += 1
        return True
