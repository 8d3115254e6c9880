# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Command line front end for the authentication session."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from frontend.container import Container
from frontend.domain.session.entities import SessionState
from frontend.shared.config import load_config_from_env_file
from frontend.shared.errors import AppError
from frontend.shared.logging import setup_logging


def describe_state(state: SessionState) -> str:
    if state.user is None:
        line = f"status={state.status}"
    else:
        line = (
            f"status={state.status} user_id={state.user.id} "
            f"username={state.user.username} email={state.user.email}"
        )
    if state.error:
        line += f" error={state.error}"
    return line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frontend",
        description="Sign in to the web app backend and keep the session across runs",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to the environment configuration file",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("status", help="Restore the stored session and print it")

    login = commands.add_parser("login", help="Sign in with email and password")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")

    register = commands.add_parser("register", help="Create an account and sign in")
    register.add_argument("--username", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", help="Prompted for when omitted")

    commands.add_parser("logout", help="Sign out and forget the stored session")
    return parser


async def run(args: argparse.Namespace, container: Container) -> int:
    async with container:
        session = await container.open_session()

        if args.command == "status":
            print(describe_state(session.state))
            return 0

        if args.command == "logout":
            print(describe_state(await session.logout()))
            return 0

        password = args.password or getpass.getpass("Password: ")
        try:
            if args.command == "login":
                state = await session.login(args.email, password)
            else:
                state = await session.register(args.username, args.email, password)
        except AppError:
            print(describe_state(session.state), file=sys.stderr)
            return 1

        print(describe_state(state))
        return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config_from_env_file(args.env_file)
    setup_logging(config.effective_log_level, config.log_file)
    return asyncio.run(run(args, Container(config)))


if __name__ == "__main__":
    sys.exit(main())
