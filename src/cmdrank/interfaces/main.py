"""Command-line entry point.

Ranks the executables on ``$PATH`` (or commands read from stdin) and keeps
the ranking in the configured save file:

- ``list``: print the ranked candidates
- ``record ID``: credit one invocation of ``ID`` and save
- ``history``: print the most recent commands

Usage:
    cmdrank list --limit 20
    ls ~/scripts | cmdrank --stdin record deploy.sh
"""

from __future__ import annotations

import argparse
import logging
import sys

from pathlib import Path

from cmdrank.domain.ranking.services import CommandSource
from cmdrank.infrastructure.commands.sources import (
    PathCommandSource,
    StaticCommandSource,
)
from cmdrank.interfaces.bootstrap import create_session
from cmdrank.interfaces.toml_config import CmdRankConfig, load_cmdrank_config
from cmdrank.shared.exceptions import CmdRankError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdrank",
        description="Rank commands by how often and how recently you run them.",
    )
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read candidate commands from stdin, one per line",
    )
    parser.add_argument(
        "--scope",
        help="Only rank commands from this PATH directory",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="Print ranked commands")
    list_parser.add_argument("--limit", type=int, default=None)

    record_parser = sub.add_parser("record", help="Credit one invocation")
    record_parser.add_argument("command_id", metavar="ID")

    sub.add_parser("history", help="Print the most recent commands")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the selected subcommand."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = _build_parser().parse_args(argv)

    try:
        config = load_cmdrank_config(args.config)
        logging.getLogger().setLevel(config.log_level)
        _execute(args, config)
    except CmdRankError as e:
        logger.error("cmdrank %s failed: %s", args.command, e)
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error")
        sys.exit(1)


def _build_source(args: argparse.Namespace) -> CommandSource:
    if args.stdin:
        return StaticCommandSource.from_lines(sys.stdin)
    return PathCommandSource()


def _execute(args: argparse.Namespace, config: CmdRankConfig) -> None:
    session = create_session(config, _build_source(args), scope=args.scope)
    session.initialize()
    engine = session.engine

    if args.command == "list":
        for command_id in engine.display[: args.limit]:
            print(command_id)
    elif args.command == "record":
        if not engine.promote(args.command_id):
            logger.warning("Unknown command %r, nothing recorded", args.command_id)
            return
        session.save()
    elif args.command == "history":
        for command_id in engine.extract_history():
            print(command_id)


if __name__ == "__main__":
    main()
