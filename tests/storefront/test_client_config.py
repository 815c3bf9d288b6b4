from pathlib import Path

from storefront.config import DEFAULT_API_URL, Settings


def test_defaults(monkeypatch):
    for key in ("LOCALMART_API_URL", "LOCALMART_MAX_CONCURRENT", "LOCALMART_STORAGE_PATH"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings.from_env()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.max_concurrent == 6


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALMART_API_URL", "https://localmart.example.com/api/")
    monkeypatch.setenv("LOCALMART_MAX_CONCURRENT", "2")
    monkeypatch.setenv("LOCALMART_STORAGE_PATH", str(tmp_path / "s.json"))

    settings = Settings.from_env()

    assert settings.api_url == "https://localmart.example.com/api"
    assert settings.max_concurrent == 2
    assert settings.storage_path == Path(tmp_path / "s.json")


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("LOCALMART_API_URL", "   ")

    assert Settings.from_env().api_url == DEFAULT_API_URL
