from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Runtime settings, overridable through ``LEDGER_*`` env vars or ``.env``."""

    APP_NAME: str = "Household Ledger"
    ENV: str = "dev"

    # 가계부 DB 파일은 실행 위치와 무관하게 apps/backend 아래에 둔다
    DATABASE_URL: str = f"sqlite:///{BACKEND_DIR / 'ledger.sqlite3'}"

    CORS_ORIGINS: list[str] = ["*"]
    # 저축상품 경과 개월 수를 계산할 때 쓰는 "오늘"의 기준 시간대
    TIMEZONE: str = "Asia/Seoul"
    LOG_LEVEL: str = "INFO"

    TREND_MAX_MONTHS: int = 24

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="LEDGER_", case_sensitive=False)

    @property
    def uses_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
