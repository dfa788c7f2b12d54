from ledger.core.config import BACKEND_DIR, Settings


def test_default_database_lives_under_backend_dir(monkeypatch):
    monkeypatch.delenv("LEDGER_DATABASE_URL", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.DATABASE_URL == f"sqlite:///{BACKEND_DIR / 'ledger.sqlite3'}"
    assert cfg.uses_sqlite is True


def test_env_prefix_overrides(monkeypatch):
    monkeypatch.setenv("LEDGER_DATABASE_URL", "postgresql://ledger@localhost/ledger")
    monkeypatch.setenv("LEDGER_TREND_MAX_MONTHS", "6")
    cfg = Settings(_env_file=None)
    assert cfg.uses_sqlite is False
    assert cfg.TREND_MAX_MONTHS == 6
