from __future__ import annotations

import argparse
import logging
import sys

from .core.errors import NimError


def _parse_moves(raw: str) -> list[int]:
    try:
        return [int(item) for item in raw.split(",") if item.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid move list '{raw}'") from exc


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: WARNING)",
    )


def _add_play_args(p: argparse.ArgumentParser) -> None:
    # Omitted options fall back to the NIMSERVER_* environment defaults.
    p.add_argument("--heap", type=int, default=None, help="Tokens on the heap at the start")
    p.add_argument("--moves", type=_parse_moves, default=None, help="Comma-separated legal moves, e.g. 1,2,3")
    p.add_argument("--strategy", type=str.upper, default=None, help="Computer strategy: DP or RANDOM")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for the RANDOM strategy")
    p.add_argument("--no-color", action="store_true", help="Disable colored output (default is colored)")


def _add_serve_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--host", type=str, default=None, help="Bind address (default: $BIND or 0.0.0.0)")
    p.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 8000)")


def main(argv: list[str] | None = None) -> int:
    """Play in the terminal (default) or serve the HTTP API.

    ``nimserver`` and ``nimserver play`` start a terminal game;
    ``nimserver serve`` runs the API under uvicorn.
    """
    args_in = list(sys.argv[1:] if argv is None else argv)

    first_non_flag = next((t for t in args_in if not t.startswith("-")), None)
    mode = "serve" if first_non_flag == "serve" else "play"
    if first_non_flag in {"play", "serve"}:
        args_in.remove(first_non_flag)

    parser = argparse.ArgumentParser(prog=f"nimserver {mode}", description="Misère Nim against the computer")
    _add_common_args(parser)
    if mode == "serve":
        _add_serve_args(parser)
    else:
        _add_play_args(parser)
    args = parser.parse_args(args_in)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if mode == "serve":
        from .web.app import main as serve

        serve(host=args.host, port=args.port)
        return 0

    from .engine_play import run_play

    try:
        run_play(
            heap_size=args.heap,
            legal_moves=args.moves,
            strategy=args.strategy,
            seed=args.seed,
            no_color=args.no_color,
        )
    except NimError as exc:
        parser.error(exc.message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
