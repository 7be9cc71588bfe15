"""Versioned endpoint identifier lookup.

The backend addresses many operations through opaque identifiers that change
with every deployment version. Lookups are exact: a version missing from the
table is an error, never matched to a neighbouring version.
"""

from __future__ import annotations

import tomllib
from importlib import resources
from typing import Any

from uonet_session.core.exceptions import UnknownEndpointError
from uonet_session.core.logging import get_logger

log = get_logger("endpoints")

EndpointTable = dict[str, dict[str, dict[str, str]]]  # version -> module -> operation -> id


def load_endpoint_tables() -> tuple[EndpointTable, EndpointTable]:
    """Load the (primary, vtoken) tables shipped with the package."""
    source = resources.files("uonet_session").joinpath("data/endpoints.toml")
    with source.open("rb") as f:
        data: dict[str, Any] = tomllib.load(f)
    return data.get("endpoints", {}), data.get("vtoken", {})


class EndpointResolver:
    """Maps (deployment version, module, operation) to an endpoint identifier."""

    def __init__(
        self,
        table: EndpointTable | None = None,
        vtoken_table: EndpointTable | None = None,
    ) -> None:
        if table is None or vtoken_table is None:
            default_table, default_vtoken = load_endpoint_tables()
            table = default_table if table is None else table
            vtoken_table = default_vtoken if vtoken_table is None else vtoken_table
        self.table = table
        self.vtoken_table = vtoken_table

    def known_versions(self) -> list[str]:
        return sorted(self.table)

    def supports(self, version: str) -> bool:
        return version in self.table

    def resolve(self, version: str, module: str, operation: str) -> str:
        """Return the identifier for an exact version/module/operation triple."""
        try:
            return self.table[version][module][operation]
        except KeyError:
            log.warning("endpoint_unknown", version=version, module=module, operation=operation)
            raise UnknownEndpointError(version, module, operation) from None

    def resolve_vtoken(self, version: str, module: str, operation: str) -> str:
        """Prefer the vToken identifier, falling back to the primary table."""
        token = self.vtoken_table.get(version, {}).get(module, {}).get(operation)
        if token is not None:
            return token
        return self.resolve(version, module, operation)
