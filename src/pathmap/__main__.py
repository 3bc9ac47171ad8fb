"""Entry point: python -m pathmap"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from pathlib import Path

from pathmap.infrastructure.config import DEBOUNCE_MS, ON_CONFIG_CHANGED, STORAGE_DIR, WatchConfig
from pathmap.infrastructure.logger import install_exception_hooks, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pathmap", description="Remap sandbox paths to local paths")
    parser.add_argument("--storage-dir", type=Path, default=STORAGE_DIR, help="Directory holding completion_prefix_map.json")
    parser.add_argument(
        "--policy",
        choices=["restart", "ignore", "prompt"],
        default=ON_CONFIG_CHANGED,
        help="What to do when the mapping file changes",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Print each path after remapping")
    resolve.add_argument("paths", nargs="+")

    sub.add_parser("watch", help="Reload the mapping whenever it changes, until interrupted")
    return parser


def run_resolve(storage_dir: Path, paths: list[str]) -> int:
    from pathmap.app import RemapContext

    context = RemapContext(storage_dir, WatchConfig(policy="ignore"))
    context.reload()
    for path in paths:
        print(context.resolve(path))
    return 0


async def watch(storage_dir: Path, policy: str) -> None:
    from pathmap.app import RemapContext

    context = RemapContext(storage_dir, WatchConfig(policy=policy, debounce_ms=DEBOUNCE_MS))

    shutdown_event = asyncio.Event()

    def signal_handler() -> None:
        logger.info("Received shutdown signal")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await context.start()
        logger.info("Watching prefix mapping", path=str(context.remapper.mapping_path), policy=policy)
        await shutdown_event.wait()
    finally:
        await context.shutdown()


def run(argv: list[str] | None = None) -> int:
    install_exception_hooks()
    args = build_parser().parse_args(argv)

    if args.command == "resolve":
        return run_resolve(args.storage_dir, args.paths)

    try:
        asyncio.run(watch(args.storage_dir, args.policy))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(run())
