"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path


async def _login(args: argparse.Namespace) -> int:
    from uonet_session.core.config import load_config
    from uonet_session.core.exceptions import UonetError
    from uonet_session.core.logging import get_logger, setup_logging
    from uonet_session.core.session_manager import SessionManager
    from uonet_session.core.urls import Site
    from uonet_session.models.tenant import Credentials

    config = load_config(args.config)
    setup_logging(
        config.logging.console_level,
        config.logging.file_level,
        config.logging.log_dir,
    )
    log = get_logger("cli")
    password = args.password or getpass.getpass("Password: ")
    credentials = Credentials(login=args.email, password=password)

    async with SessionManager(config) as session:
        try:
            result = await session.login(credentials)
            for site in args.prime:
                await session.prime(Site(site))
        except UonetError as e:
            log.error("login_failed", error_type=type(e).__name__, error=str(e))
            return 1
    print(result.model_dump_json(indent=2))
    return 0


def _endpoint(args: argparse.Namespace) -> int:
    from uonet_session.core.endpoints import EndpointResolver
    from uonet_session.core.exceptions import UnknownEndpointError

    resolver = EndpointResolver()
    try:
        if args.vtoken:
            print(resolver.resolve_vtoken(args.version, args.module, args.operation))
        else:
            print(resolver.resolve(args.version, args.module, args.operation))
    except UnknownEndpointError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def main() -> None:
    from uonet_session.core.urls import Site

    parser = argparse.ArgumentParser(description="UONET+ session tool")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in and print the discovered student modules")
    login.add_argument("--config", type=Path, default=Path("config.toml"), help="TOML config file")
    login.add_argument("--email", required=True, help="Login, optionally 'login||student'")
    login.add_argument("--password", default="", help="Password (prompted when omitted)")
    login.add_argument(
        "--prime",
        action="append",
        default=[],
        choices=[site.value for site in Site],
        help="Module to prime after login, e.g. uonetplus-uczen (repeatable)",
    )

    endpoint = sub.add_parser("endpoint", help="Resolve an endpoint identifier")
    endpoint.add_argument("version")
    endpoint.add_argument("module")
    endpoint.add_argument("operation")
    endpoint.add_argument("--vtoken", action="store_true", help="Prefer the vToken table")

    args = parser.parse_args()
    if args.command == "login":
        sys.exit(asyncio.run(_login(args)))
    sys.exit(_endpoint(args))


if __name__ == "__main__":
    main()
