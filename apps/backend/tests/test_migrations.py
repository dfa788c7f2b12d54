from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

BACKEND_DIR = Path(__file__).resolve().parents[1]


def test_upgrade_creates_full_schema(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.sqlite3'}"
    cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)

    command.upgrade(cfg, "head")

    tables = set(inspect(create_engine(url)).get_table_names())
    assert {"account", "category", "transaction", "budget", "savingsproduct", "stock"} <= tables

    command.downgrade(cfg, "base")
    assert "transaction" not in set(inspect(create_engine(url)).get_table_names())
