from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class settings(BaseSettings):
    EZPMS_REQUIRED_WEIGHTAGE: int = 100
    EZPMS_DEMO_PASSWORD: str = "password123"
    EZPMS_SNAPSHOT_PATH: Path = Path("ezpms_snapshot.json")

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


def get_setting():
    return settings()
