"""
Upload every file of a solution, then submit each data set against the shared sources.
"""

import asyncio
from pathlib import Path
from typing import Any, Mapping, Protocol

from hashcode_upload.errors import StartupConfigurationError
from hashcode_upload.schema import SOURCES_KEY, attempt
from hashcode_upload.util.log import get_logger
from hashcode_upload.util.utils import newest_build, shorten

logger = get_logger(__name__)

OUTPUT_SUFFIX = ".out.txt"


class Judge(Protocol):
    async def upload(self, file_path: str) -> str: ...

    async def submit(self, data_set: str, submission_blob_key: str, sources_blob_key: str) -> Any: ...


async def upload_all(solution: Mapping[str, str], client: Judge) -> dict[str, str]:
    keys = list(solution)
    blob_keys = await asyncio.gather(*(client.upload(solution[key]) for key in keys))
    return dict(zip(keys, blob_keys))


async def submit_solution(solution: Any, data_sets: Mapping[str, str], client: Judge) -> dict[str, Any]:
    """
    Validate a solution, upload all of its files and submit every data set.

    Uploads run concurrently, and so do submissions, but no submission starts
    before every upload has finished. The first failure propagates; requests
    already sent are neither cancelled nor rolled back.

    :param solution: data set name -> output file path, plus 'sources'
    :param data_sets: data set name -> remote data set id
    :param client: object providing async upload() and submit()
    :return: data set name -> judge acknowledgement
    """
    solution = attempt(solution, data_sets)

    blob_keys = await upload_all(solution, client)
    sources_blob_key = blob_keys.pop(SOURCES_KEY)

    async def submit_one(name: str, blob_key: str):
        logger.debug(f"submitting data set {name} (key: {shorten(blob_key)})")
        return await client.submit(data_sets[name], blob_key, sources_blob_key)

    names = list(blob_keys)
    results = await asyncio.gather(*(submit_one(name, blob_keys[name]) for name in names))
    return dict(zip(names, results))


def default_solution(data_sets: Mapping[str, str], builds_dir: Path, workdir: Path = Path(".")) -> dict[str, str]:
    """Build the solution for a standalone run: <name>.out.txt per data set plus the newest build."""
    if not Path(builds_dir).is_dir():
        raise StartupConfigurationError(f"builds directory not found: {builds_dir}")
    sources = newest_build(builds_dir)
    if sources is None:
        raise StartupConfigurationError(f"no build found in {builds_dir}")

    solution = {name: str(Path(workdir) / f"{name}{OUTPUT_SUFFIX}") for name in data_sets}
    solution[SOURCES_KEY] = str(sources)
    return solution
