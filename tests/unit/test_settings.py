from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from formschema.exceptions import SettingsError
from formschema.settings import Settings, _is_missing_settings_error, ensure_env_file_exists, get_settings

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_payload = (
        f"APP_ENV={'test'}\n"
        f"LOG_LEVEL={'DEBUG'}\n"
        f"LOG_JSON={'false'}\n"
        f"IMPORT_BATCH_SIZE={25}\n"
        f"PRUNE_STALE_FIELDS={'true'}\n"
        f"CATALOG_PATH={'out/catalog.json'}\n"
    )
    env_file.write_text(env_payload, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.import_batch_size == 25
    assert settings.prune_stale_fields is True
    assert settings.catalog_path == "out/catalog.json"


def test_settings_defaults_keep_stale_fields(monkeypatch) -> None:
    monkeypatch.delenv("PRUNE_STALE_FIELDS", raising=False)
    settings = Settings()

    assert settings.prune_stale_fields is False
    assert settings.error_report_limit >= 1


def test_settings_rejects_zero_batch_size(monkeypatch) -> None:
    monkeypatch.setenv("IMPORT_BATCH_SIZE", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("formschema.settings.Settings", _fake_settings)
    monkeypatch.setattr("formschema.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("formschema.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("formschema.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("formschema.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("formschema.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError):
        get_settings()

    get_settings.cache_clear()


def test_is_missing_settings_error_only_for_validation_errors() -> None:
    assert _is_missing_settings_error(RuntimeError("missing")) is False


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("METADATA_PATH=data/analysis_results.json\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.exists()
    assert "METADATA_PATH" in env_file.read_text(encoding="utf-8")
