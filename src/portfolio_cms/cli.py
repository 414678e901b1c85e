from __future__ import annotations

import argparse
import getpass
import logging
import sys
from collections.abc import Sequence


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-cms", description="Portfolio CMS server administration."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--no-reload", action="store_true", help="Disable auto-reload")

    admin = commands.add_parser("create-admin", help="Create an admin account")
    admin.add_argument("email")
    admin.add_argument("--name", default="")
    admin.add_argument("--password", help="Account password; prompted for when omitted")
    return parser


def _create_admin(args: argparse.Namespace) -> int:
    from portfolio_cms.data.db import init_db
    from portfolio_cms.services.auth import create_user

    password = args.password or getpass.getpass("Password: ")
    init_db()
    created, error = create_user(args.email, password, args.name)
    if not created:
        print(f"❌ {error}")
        return 1
    print(f"✅ Admin account {args.email} created.")
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv`` and run the selected command.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        from portfolio_cms.api.main import main as serve

        serve(host=args.host, port=args.port, reload=not args.no_reload)
        return 0
    return _create_admin(args)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the CLI application."""
    try:
        return run_cli(argv)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user. Exiting.")
        return 130
    except Exception as exc:
        print(f"\n❌ Unexpected error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
