from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from arenalru import __version__
from arenalru.cache import LRUCache
from arenalru.errors import CapacityError, ConfigError, ScriptError
from arenalru.log import LEVELS, configure_logging

if TYPE_CHECKING:  # pragma: no cover
    from arenalru.config import ArenaLruConfig

EXIT_OK = 0
EXIT_CONFIG_OR_USAGE = 2
EXIT_SCRIPT_ERROR = 3

MISS = "<miss>"


@dataclass(frozen=True, slots=True)
class Op:
    kind: Literal["set", "get"]
    key: str
    value: str | None
    lineno: int


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for arenalru.toml).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to arenalru.toml (defaults to <root>/arenalru.toml).",
    )
    p.add_argument("--capacity", type=int, default=None, help="Cache capacity override.")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LEVELS,
        default=None,
        help="Logging level override.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit a single JSON document instead of text.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="arenalru")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_p = subparsers.add_parser("replay", help="Replay a script of set/get operations.")
    replay_p.add_argument("script", type=str, help="Script file ('-' for stdin).")
    _add_common_flags(replay_p)

    demo_p = subparsers.add_parser("demo", help="Run the capacity-3 eviction walkthrough.")
    _add_common_flags(demo_p)

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _is_json_mode(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "json_output", False))


def _load_config(args: argparse.Namespace) -> ArenaLruConfig:
    from arenalru.config import default_config, find_project_root, load_config

    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None
    if root is None and config_path is None:
        # No config anywhere above cwd is fine; fall back to defaults.
        try:
            root = find_project_root(Path.cwd())
        except ConfigError:
            return default_config()

    return load_config(root=root, config_path=config_path)


def parse_script(text: str) -> list[Op]:
    """Parse ``set KEY VALUE`` / ``get KEY`` lines. Blank lines and ``#`` comments are skipped."""

    ops: list[Op] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split(None, 2)
        verb = parts[0].lower()
        if verb == "set" and len(parts) == 3:
            ops.append(Op("set", parts[1], parts[2], lineno))
        elif verb == "get" and len(parts) == 2:
            ops.append(Op("get", parts[1], None, lineno))
        else:
            raise ScriptError(f"line {lineno}: expected `set KEY VALUE` or `get KEY`, got {line!r}")
    return ops


def run_ops(cache: LRUCache[str, str], ops: list[Op]) -> list[tuple[str, str | None]]:
    """Apply ``ops`` in order and return the result of every ``get``."""

    gets: list[tuple[str, str | None]] = []
    for op in ops:
        if op.kind == "set":
            cache.set(op.key, op.value)  # type: ignore[arg-type]
        else:
            gets.append((op.key, cache.get(op.key)))
    return gets


def _read_script(path: str) -> str:
    try:
        if path == "-":
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptError(f"cannot read script {path}: {e}") from e


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_error(e: BaseException) -> None:
    msg = (str(e) or repr(e)).strip()
    _eprint(f"error: {msg}")


def _prepare(args: argparse.Namespace) -> LRUCache[str, str]:
    cfg = _load_config(args)
    configure_logging(args.log_level or cfg.logging.level)
    capacity = args.capacity if args.capacity is not None else cfg.cache.capacity
    return LRUCache(capacity)


def _emit(cache: LRUCache[str, str], gets: list[tuple[str, str | None]], *, json_mode: bool) -> None:
    if json_mode:
        doc = {
            "capacity": cache.capacity,
            "count": cache.count,
            "gets": [{"key": k, "value": v} for k, v in gets],
            "keys": cache.keys(),
            "stats": asdict(cache.stats),
        }
        print(json.dumps(doc, indent=2))
        return

    for key, value in gets:
        print(f"{key}={MISS if value is None else value}")
    st = cache.stats
    print(
        f"count={cache.count}/{cache.capacity} hits={st.hits} misses={st.misses} "
        f"evictions={st.evictions}"
    )


def cmd_replay(args: argparse.Namespace) -> int:
    try:
        cache = _prepare(args)
        ops = parse_script(_read_script(args.script))
    except (ConfigError, CapacityError, ValueError) as e:
        _print_error(e)
        return EXIT_CONFIG_OR_USAGE
    except ScriptError as e:
        _print_error(e)
        return EXIT_SCRIPT_ERROR

    with cache:
        gets = run_ops(cache, ops)
        _emit(cache, gets, json_mode=_is_json_mode(args))
    return EXIT_OK


DEMO_SCRIPT = """\
set 1 1
set 2 2
set 3 3
get 3
get 2
get 1
get 2
# recency is now 2, 1, 3; the next insert evicts 3
set 4 4
get 3
get 2
get 1
get 4
"""


def cmd_demo(args: argparse.Namespace) -> int:
    if args.capacity is None:
        args.capacity = 3
    try:
        cache = _prepare(args)
    except (ConfigError, CapacityError, ValueError) as e:
        _print_error(e)
        return EXIT_CONFIG_OR_USAGE

    with cache:
        gets = run_ops(cache, parse_script(DEMO_SCRIPT))
        _emit(cache, gets, json_mode=_is_json_mode(args))
        if not _is_json_mode(args):
            print("recency: " + ", ".join(cache.keys()))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_OR_USAGE

    if args.command == "replay":
        return cmd_replay(args)
    if args.command == "demo":
        return cmd_demo(args)

    return EXIT_CONFIG_OR_USAGE


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
