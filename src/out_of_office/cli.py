"""Command-line interface for the Out-of-Office agent.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

import structlog

from out_of_office import __version__
from out_of_office.agent.autoresponder import OutOfOfficeAgent
from out_of_office.config import Settings, get_settings
from out_of_office.exceptions import AuthenticationError, ConfigurationError
from out_of_office.gmail.client import GmailClient
from out_of_office.gmail.credentials import CredentialStore

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="out-of-office", description="Gmail out-of-office agent")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("login", help="Authorize Gmail access and save token.json")

    run_parser = subparsers.add_parser("run", help="Poll the inbox and auto-reply until stopped")
    run_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polls (default: settings poll_interval_seconds)",
    )

    subparsers.add_parser("tick", help="Run a single poll and print its outcome")

    return parser


def _cmd_login(settings: Settings) -> int:
    try:
        CredentialStore(settings).authorize()
    except (AuthenticationError, ConfigurationError) as exc:
        logger.error("login_failed", error=str(exc))
        print(f"Error logging in: {exc}", file=sys.stderr)
        return 1

    print("Successfully logged in to Google!")
    return 0


async def _authenticated_agent(settings: Settings) -> OutOfOfficeAgent | None:
    gmail = GmailClient(settings)
    try:
        await gmail.authenticate()
    except (AuthenticationError, ConfigurationError) as exc:
        logger.error("startup_authorization_failed", error=str(exc))
        print(f"Error logging in: {exc}", file=sys.stderr)
        return None
    return OutOfOfficeAgent(gmail_client=gmail, settings=settings)


async def _cmd_run(settings: Settings) -> int:
    agent = await _authenticated_agent(settings)
    if agent is None:
        return 1

    loop = asyncio.get_running_loop()
    try:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, agent.stop)
    except (NotImplementedError, AttributeError):
        # Windows event loops have no signal handlers; Ctrl+C raises instead.
        pass

    await agent.run()
    return 0


async def _cmd_tick(settings: Settings) -> int:
    agent = await _authenticated_agent(settings)
    if agent is None:
        return 1

    result = await agent.run_tick()
    parts = [result.outcome.value]
    if result.thread_id:
        parts.append(f"thread={result.thread_id}")
    if result.error:
        parts.append(f"error={result.error}")
    print("\t".join(parts))
    return 1 if result.failed else 0


def configure_logging(settings: Settings) -> None:
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    # Logs go to stderr so command output on stdout stays parseable.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Out-of-Office agent CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()
    configure_logging(settings)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    logger.info(
        "out_of_office_started",
        version=__version__,
        command=parsed.command,
        debug=settings.debug,
    )

    if parsed.command == "login":
        return _cmd_login(settings)
    if parsed.command == "run":
        if parsed.interval is not None:
            settings = settings.model_copy(update={"poll_interval_seconds": parsed.interval})
        try:
            return asyncio.run(_cmd_run(settings))
        except KeyboardInterrupt:
            logger.info("interrupted")
            return 0
    if parsed.command == "tick":
        return asyncio.run(_cmd_tick(settings))

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
