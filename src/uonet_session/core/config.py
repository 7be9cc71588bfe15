"""Configuration management with Pydantic models and TOML loading."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from uonet_session.models.tenant import LoginVariant, TenantCoordinates

USER_AGENT_TEMPLATE = (
    "Mozilla/5.0 (Linux; Android {android_version}; {build_tag}) "
    "AppleWebKit/{webkit_rev} (KHTML, like Gecko) "
    "Chrome/{chrome_rev} Mobile "
    "Safari/{webkit_rev}"
)


class LoginConfig(BaseModel):
    variant: LoginVariant = LoginVariant.AUTO


class HttpConfig(BaseModel):
    timeout: float = 30.0
    verify: bool = True
    android_version: str = "13"
    build_tag: str = "SM-S911B"
    webkit_rev: str = "537.36"
    chrome_rev: str = "120.0.0.0"

    @property
    def user_agent(self) -> str:
        return USER_AGENT_TEMPLATE.format(
            android_version=self.android_version,
            build_tag=self.build_tag,
            webkit_rev=self.webkit_rev,
            chrome_rev=self.chrome_rev,
        )


class LoggingConfig(BaseModel):
    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_dir: Path | None = None


class AppConfig(BaseModel):
    tenant: TenantCoordinates = Field(default_factory=TenantCoordinates)
    login: LoginConfig = Field(default_factory=LoginConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Path) -> AppConfig:
    """Load configuration from a TOML file, falling back to defaults."""
    if not path.exists():
        return AppConfig()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return AppConfig(**data)
