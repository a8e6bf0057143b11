"""Tests for configuration parsing."""

from photobooth.config import Settings, parse_cors_origins


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("PORT", raising=False)

    settings = Settings()

    assert settings.port == 3000
    assert settings.public_mount == "/uploads"
    assert settings.countdown_from == 3


def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "photos"))

    settings = Settings()

    assert settings.port == 8080
    assert settings.upload_dir == tmp_path / "photos"


def test_parse_cors_origins() -> None:
    assert parse_cors_origins(None) == []
    assert parse_cors_origins("*") == ["*"]
    assert parse_cors_origins(" http://a.test, ,http://b.test ") == [
        "http://a.test",
        "http://b.test",
    ]
