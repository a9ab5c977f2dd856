# mercury_evolution/cli.py
"""
Command-line adapter used by the notes system to report note access.

    mercury-track <action> <path>

Prints ``{"success": true}`` on stdout, or ``{"error": ...}`` on stderr with
exit status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from mercury_evolution.engine import EvolutionEngine
from mercury_evolution.exceptions import EvolutionError
from mercury_evolution.models import NoteAction

USAGE = "Usage: mercury-track <action> <path>"


async def track(action: str, path: str, root: str | None = None) -> None:
    engine = EvolutionEngine(root)
    await engine.track_note_access(action, path)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mercury-track",
        description="Record a note access in the Mercury evolution heat map",
    )
    parser.add_argument(
        "action",
        nargs="?",
        help=f"Note action ({', '.join(a.value for a in NoteAction)})",
    )
    parser.add_argument("path", nargs="?", help="Note path relative to the vault")
    parser.add_argument("--root", default=None, help="Persistence root (defaults to MERCURY_VAULT_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.action or not args.path:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        asyncio.run(track(args.action, args.path, args.root))
    except EvolutionError as e:
        print(json.dumps({"error": e.message, "kind": e.kind.value}), file=sys.stderr)
        return 1

    print(json.dumps({"success": True}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
