"""Upload the current outputs and newest build to the Hash Code judge.

Usage examples:
  hashcode-upload
  hashcode-upload --builds-dir dist/ --workdir out/
  hashcode-upload --dry-run

Data sets are read from HASH_CODE_INPUT{1..4}_NAME / HASH_CODE_INPUT{1..4}_ID
(environment, .env or the [tool.hashcode-upload] table of pyproject.toml).
Each data set's output is expected at <name>.out.txt in the working
directory; the sources are the last entry (by name) of the builds directory.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from hashcode_upload.client import JudgeClient
from hashcode_upload.config import debug_enabled, load_config
from hashcode_upload.errors import JudgeUploadError
from hashcode_upload.util.log import get_logger, setup_logging
from hashcode_upload.workflow import default_solution, submit_solution

logger = get_logger(__name__)


def seconds(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number of seconds: {value!r}")
    if timeout < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return timeout


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload solutions and sources to the Hash Code judge")
    parser.add_argument("--builds-dir", "-b", help="Directory holding build archives (default: <project root>/.builds)")
    parser.add_argument("--workdir", "-w", default=".", help="Directory holding the <data set>.out.txt files")
    parser.add_argument("--base-url", help="Base URL of the judge API")
    parser.add_argument("--timeout", type=seconds, help="Request timeout in seconds (0 disables it)")
    parser.add_argument("--dry-run", action="store_true", help="Don't send anything; show what would be uploaded")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def run(config, solution: dict[str, str]) -> dict:
    # on failure the session is closed while sibling requests may still be running in worker threads;
    # they fail or finish on their own and their results are discarded
    async with JudgeClient(config) as client:
        return await submit_solution(solution, config.data_sets, client)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose or debug_enabled() else "INFO")

    try:
        config = load_config()
    except JudgeUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.timeout is not None:
        overrides["timeout"] = args.timeout or None
    if args.builds_dir:
        overrides["builds_dir"] = Path(args.builds_dir)
    config = replace(config, **overrides)

    if not config.data_sets:
        print(
            "ERROR: data set ids not initialized! Set HASH_CODE_INPUT1_NAME and HASH_CODE_INPUT1_ID "
            "(up to 4 pairs) in the environment, .env or pyproject.toml",
            file=sys.stderr,
        )
        return 1

    try:
        solution = default_solution(config.data_sets, config.builds_dir, Path(args.workdir))
    except JudgeUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    logger.debug(f"files to upload {solution}")

    if args.dry_run:
        print("DRY-RUN: would upload")
        for key, path in solution.items():
            size = os.path.getsize(path) if os.path.isfile(path) else None
            print(f"  {key}: {path} ({'missing' if size is None else f'{size} bytes'})")
        print(f"  to: {config.base_url}")
        return 0

    try:
        results = asyncio.run(run(config, solution))
    except JudgeUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"ERROR: cannot read solution file: {exc}", file=sys.stderr)
        return 1

    for name, acknowledgement in results.items():
        print(f"{name}: submitted")
        if acknowledgement:
            print(f"  {acknowledgement}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
