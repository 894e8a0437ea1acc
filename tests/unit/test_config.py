from tinylink.config import settings


def test_defaults(monkeypatch):
    for name in ("TLNK_DATA", "TLNK_STORAGE_BACKEND", "TLNK_ACCESS_KEY", "TLNK_KEYGEN_START", "TLNK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert settings.data_dir() is None
    assert settings.storage_backend() == "file"
    assert settings.access_key() is None
    assert settings.keygen_start() == 1296
    assert settings.log_level() == "INFO"


def test_env_is_read_at_call_time(monkeypatch):
    monkeypatch.setenv("TLNK_STORAGE_BACKEND", "  Memory ")
    monkeypatch.setenv("TLNK_ACCESS_KEY", "abc")
    monkeypatch.setenv("TLNK_LOG_LEVEL", "debug")
    assert settings.storage_backend() == "memory"
    assert settings.access_key() == "abc"
    assert settings.log_level() == "DEBUG"


def test_keygen_start_bad_values(monkeypatch):
    monkeypatch.setenv("TLNK_KEYGEN_START", "lots")
    assert settings.keygen_start() == 1296
    monkeypatch.setenv("TLNK_KEYGEN_START", "-5")
    assert settings.keygen_start() == 1
