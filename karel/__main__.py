"""Module entry point for `python -m karel`."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from karel.app import describe_world, run_program
from karel.logging_setup import configure_logging
from karel.settings import resolve_settings
from karel.sim.world_loader import InvalidWorldFile


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a Karel program.")
    parser.add_argument(
        "program",
        type=Path,
        nargs="?",
        default=None,
        help="Python file that drives Karel through the karel module.",
    )
    parser.add_argument(
        "--world",
        type=Path,
        default=None,
        help="World file to load before the program starts.",
    )
    parser.add_argument(
        "--check",
        type=Path,
        default=None,
        help="Validate a world file and print a summary (no program is run).",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Write a CSV snapshot after every action (implies --prompt).",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Wait for Enter before every action.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=None,
        help="Disable the terminal animation.",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Animation speed multiplier; overrides the world file.",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Number of intermediate frames when Karel moves.",
    )
    parser.add_argument(
        "--csv-dir",
        type=Path,
        default=None,
        help="Directory for the CSV snapshot.",
    )
    parser.add_argument(
        "--bmp",
        type=Path,
        default=None,
        help="Save a BMP image of the final world.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    args = parser.parse_args(argv)

    settings = resolve_settings(
        headless=args.headless,
        speed=args.speed,
        animation_steps=args.steps,
        csv_output=args.csv,
        prompt=args.prompt,
        csv_dir=args.csv_dir,
        log_level=args.log_level,
    )
    configure_logging(settings.log_level)
    console = Console()
    error_console = Console(stderr=True)

    try:
        if args.check is not None:
            console.print(describe_world(args.check))
            return 0
        if args.program is None:
            parser.error("a program file is required unless --check is given")
        run_program(
            args.program,
            world=args.world,
            settings=settings,
            bmp_path=args.bmp,
        )
    except InvalidWorldFile as exc:
        error_console.print(f"Invalid world file: {exc}", markup=False, highlight=False)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
