"""Tenant coordinates, credentials and login variants."""

from __future__ import annotations

import re
import unicodedata
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

SWITCH_LOGIN_DELIMITER = "||"


class LoginVariant(StrEnum):
    AUTO = "Auto"
    STANDARD = "Standard"
    ADFS = "ADFS"
    ADFS_LIGHT = "ADFSLight"
    ADFS_LIGHT_SCOPED = "ADFSLightScoped"
    ADFS_LIGHT_CUFS = "ADFSLightCufs"
    ADFS_CARDS = "ADFSCards"


def normalize_symbol(symbol: str) -> str:
    """Turn a user-typed tenant symbol into the slug used in portal URLs."""
    value = symbol.strip().lower().replace("default", "")
    value = unicodedata.normalize("NFD", value)
    value = "".join(c for c in value if not unicodedata.combining(c))
    value = value.replace("ł", "l")
    value = re.sub(r"[^a-z0-9]", "", value)
    return value or "Default"


class TenantCoordinates(BaseModel):
    """Where a school lives within the multi-tenant portal."""

    model_config = ConfigDict(frozen=True)

    scheme: Literal["http", "https"] = "https"
    host: str = "vulcan.net.pl"
    domain_suffix: str = ""
    symbol: str = "Default"
    version: str = ""
    school_id: str = ""

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return normalize_symbol(value)


class Credentials(BaseModel):
    """Login and password, optionally with a ``login||student`` switch suffix."""

    model_config = ConfigDict(frozen=True)

    login: str
    password: SecretStr

    @property
    def submitted_login(self) -> str:
        return self.login.split(SWITCH_LOGIN_DELIMITER, 1)[0]

    @property
    def switch_target(self) -> str:
        if SWITCH_LOGIN_DELIMITER not in self.login:
            return ""
        return self.login.split(SWITCH_LOGIN_DELIMITER, 1)[1]
