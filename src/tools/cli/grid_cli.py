"""Command line front-end driving the page controller."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Dict, List

from orchestrator import log
from page.controller import LEVEL_ERROR, PageController
from page.history import AddressBar
from page.widgets import format_board
from ports.backend_port import select_backend
from ports.inprocess_adapter import InProcessBackend

_DEFAULT_URL = "http://localhost:8080/"


def _address_bar(raw: str | None) -> AddressBar:
    if not raw:
        return AddressBar(_DEFAULT_URL)
    if raw.startswith("?"):
        bar = AddressBar(_DEFAULT_URL)
        bar.replace_state(raw)
        return bar
    if "://" not in raw:
        bar = AddressBar(_DEFAULT_URL)
        bar.replace_state(f"?grid={raw}")
        return bar
    return AddressBar(raw)


def _env(args: argparse.Namespace) -> Dict[str, str]:
    env: Dict[str, str] = {}
    if args.backend:
        env["CLI_PUZZLE_BACKEND_KIND"] = args.backend
    if args.hints is not None:
        env["CLI_EDITOR_HINTS"] = "1" if args.hints else "0"
    return env


async def _execute(args: argparse.Namespace) -> int:
    env = _env(args)
    backend = select_backend(args.profile, env)
    if isinstance(backend, InProcessBackend):
        await backend.initialize()

    controller = PageController(
        backend,
        address_bar=_address_bar(args.url),
        profile=args.profile,
        env=env,
    )
    controller.load()

    try:
        if args.command == "solve":
            await controller.solve()
        elif args.command == "solve-once":
            await controller.solve_once()
        elif args.command == "filled":
            await controller.fetch_filled()
        elif args.command == "generate":
            await controller.generate(args.difficulty, args.seed)
    finally:
        await backend.close()

    print(format_board(controller.widgets, show_placeholders=controller.hints))
    if not controller.message.hidden:
        print(controller.message.text)
    print(controller.url)
    return 1 if controller.message.level == LEVEL_ERROR else 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sudoku grid editor")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", default=None, help="Page URL, '?grid=...' query or bare 81-character grid")
    common.add_argument("--backend", choices=("remote", "inprocess"), default=None)
    common.add_argument("--profile", default="dev")
    hints = common.add_mutually_exclusive_group()
    hints.add_argument("--hints", dest="hints", action="store_true", default=None, help="Show candidate digits")
    hints.add_argument("--no-hints", dest="hints", action="store_false", help="Hide candidate digits")
    common.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("show", parents=[common], help="Render the grid from --url")
    sub.add_parser("solve", parents=[common], help="Solve the grid to completion")
    sub.add_parser("solve-once", parents=[common], help="Run a single solving pass")
    sub.add_parser("filled", parents=[common], help="Fetch a filled grid from the remote API")

    generate = sub.add_parser("generate", parents=[common], help="Generate a puzzle in-process")
    generate.add_argument("--difficulty", default="medium")
    generate.add_argument("--seed", type=int, default=None)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    log.configure_from_config()
    return asyncio.run(_execute(args))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
