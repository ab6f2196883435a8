"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from formschema.exceptions import SettingsError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "formschema"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    metadata_path: str = Field(
        default="data/analysis_results.json",
        validation_alias="METADATA_PATH",
        description="PDF analysis metadata consumed by the bulk importer.",
    )
    pdf_source_dir: str = Field(
        default="data/pdfs",
        validation_alias="PDF_SOURCE_DIR",
        description="Directory holding the source court form PDFs.",
    )
    pdf_template_dir: str = Field(
        default="pdf_templates",
        validation_alias="PDF_TEMPLATE_DIR",
        description="Directory where imported PDF templates are copied.",
    )
    schema_dir: str = Field(
        default="form_schemas",
        validation_alias="SCHEMA_DIR",
        description="Directory of generated form schema documents.",
    )
    catalog_path: str = Field(
        default="results/catalog.json",
        validation_alias="CATALOG_PATH",
        description="JSON catalog file used as the form repository.",
    )
    import_batch_size: int = Field(
        default=100,
        ge=1,
        validation_alias="IMPORT_BATCH_SIZE",
        description="Number of forms between import progress messages.",
    )
    error_report_limit: int = Field(
        default=10,
        ge=1,
        validation_alias="ERROR_REPORT_LIMIT",
        description="Number of errors listed in the import summary.",
    )
    prune_stale_fields: bool = Field(
        default=False,
        validation_alias="PRUNE_STALE_FIELDS",
        description="Delete stored fields absent from a re-imported form.",
    )
    ci: bool = Field(
        default=False,
        validation_alias="CI",
        description="Running in an automated context; import errors fail the process.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            try:
                ensure_env_file_exists()
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
