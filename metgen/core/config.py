from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from metgen.models.metar import DataSource, Units

BUNDLED_AIRPORTS_CSV = Path(__file__).resolve().parent.parent / "data" / "airports.csv"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="METGEN_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    openweather_api_key: SecretStr = Field(default=SecretStr(""))
    one_call_api_key: SecretStr = Field(default=SecretStr(""))

    default_units: Units = Field(default=Units.METRIC)
    default_source: DataSource = Field(default=DataSource.STANDARD)

    user_agent: str = Field(
        default="metgen/0.9 (synthesized METAR generator)",
        min_length=3,
        max_length=256,
    )
    http_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)

    airports_csv_path: Path = Field(default=BUNDLED_AIRPORTS_CSV)
    user_airports_path: Path = Field(default=Path("user_airports.json"))

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
