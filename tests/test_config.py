import pytest
from pydantic import ValidationError as PydanticValidationError

from leaddesk.core.config import StoreConfig, load_config


def test_load_config_from_explicit_path(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "database:\n"
        "  url: sqlite:///./other.db\n"
        "store:\n"
        "  type: Supabase\n"
        "supabase:\n"
        "  url: https://example.supabase.co\n"
        "importer:\n"
        "  category_column: niche\n"
        "backend_cors_origins: http://a.test, http://b.test\n"
    )

    settings = load_config(str(config_file))

    assert settings.DATABASE_URL == "sqlite:///./other.db"
    assert settings.database.is_sqlite
    assert settings.store.type == "supabase"
    assert settings.supabase.db_schema == "public"
    assert settings.importer.category_column == "niche"
    assert settings.importer.default_status == "Fresh Lead"
    assert settings.backend_cors_origins == ["http://a.test", "http://b.test"]


def test_environment_variable_is_used(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("log_level: DEBUG\n")
    monkeypatch.setenv("LEADDESK_CONFIG", str(config_file))

    assert load_config().log_level == "DEBUG"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


def test_empty_file(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    with pytest.raises(ValueError):
        load_config(str(config_file))


def test_unknown_store_type():
    with pytest.raises(PydanticValidationError):
        StoreConfig(type="mongo")
