"""
Configuration for the judge upload.

Values come from, in order of precedence: the process environment, a `.env`
file in the project root (read with python-dotenv), the `[tool.hashcode-upload]`
table of the project's pyproject.toml, and the defaults below.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from hashcode_upload.errors import StartupConfigurationError
from hashcode_upload.util.log import get_logger
from hashcode_upload.util.utils import get_root_dir, manifest_name, shorten

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://hashcode-judge.appspot.com/api/judge/v1"
DEFAULT_TIMEOUT = 60.0
MAX_DATA_SETS = 4

TOKEN_VAR = "HASH_CODE_JUDGE_AUTH_TOKEN"
BASE_URL_VAR = "HASH_CODE_JUDGE_BASE_URL"
BUILDS_DIR_VAR = "HASH_CODE_BUILDS_DIR"
TIMEOUT_VAR = "HASH_CODE_REQUEST_TIMEOUT"
DEBUG_VAR = "HASH_CODE_DEBUG"
MANIFEST_TABLE = "hashcode-upload"


@dataclass(frozen=True)
class JudgeConfig:
    auth_token: str
    data_sets: dict[str, str] = field(default_factory=dict)
    base_url: str = DEFAULT_BASE_URL
    builds_dir: Path = Path(".builds")
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def create_url_uri(self) -> str:
        return self.base_url.rstrip("/") + "/upload/createUrl"

    @property
    def submit_uri(self) -> str:
        return self.base_url.rstrip("/") + "/submissions"


def read_manifest(root: Path) -> dict:
    """Return the `[tool.hashcode-upload]` table of root/pyproject.toml, or {} when there is none."""
    path = root / manifest_name
    if not path.is_file():
        return {}
    with open(path, "rb") as fh:
        data = tomllib.load(fh)
    return data.get("tool", {}).get(MANIFEST_TABLE, {})


def load_auth_token(environ: Mapping[str, str]) -> str:
    token = environ.get(TOKEN_VAR)
    if not token:
        raise StartupConfigurationError(
            f"{TOKEN_VAR} not defined. Set it with your auth token to the Judge system."
        )
    logger.debug(f"token {shorten(token)}")
    return token


def load_data_sets(environ: Mapping[str, str], manifest: Optional[Mapping] = None) -> dict[str, str]:
    """
    Collect up to four data set name/id pairs.

    A pair with only one half set is skipped, not reported as an error.

    Args:
        environ: HASH_CODE_INPUT{i}_NAME / HASH_CODE_INPUT{i}_ID variables
        manifest: input{i}_name / input{i}_id keys, overridden by environ

    Returns:
        Mapping of data set name to remote data set id
    """
    manifest = manifest or {}
    data_sets: dict[str, str] = {}
    for i in range(1, MAX_DATA_SETS + 1):
        name = environ.get(f"HASH_CODE_INPUT{i}_NAME") or manifest.get(f"input{i}_name")
        data_set_id = environ.get(f"HASH_CODE_INPUT{i}_ID") or manifest.get(f"input{i}_id")
        if not name or not data_set_id:
            if name or data_set_id:
                logger.debug(f"ignoring incomplete data set definition input{i}")
            continue
        if name in data_sets:
            logger.warning(f"data set '{name}' defined twice, using input{i}")
        logger.debug(f"found data set '{name}'")
        data_sets[str(name)] = str(data_set_id)
    return data_sets


def _parse_timeout(value) -> Optional[float]:
    if value in (None, ""):
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise StartupConfigurationError(f"{TIMEOUT_VAR} must be a number of seconds, got {value!r}")
    if timeout < 0:
        raise StartupConfigurationError(f"{TIMEOUT_VAR} must not be negative, got {value!r}")
    # 0 disables the timeout
    return timeout or None


def resolve_environ(root: Path, environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Merge root/.env under the given environment (os.environ by default)."""
    if environ is None:
        environ = os.environ
    dotenv_path = root / ".env"
    file_values = dotenv_values(dotenv_path) if dotenv_path.is_file() else {}
    merged = {key: value for key, value in file_values.items() if value is not None}
    merged.update(environ)
    return merged


def load_config(environ: Optional[Mapping[str, str]] = None, root: Optional[Path] = None) -> JudgeConfig:
    """
    Resolve the full configuration for one invocation.

    Raises StartupConfigurationError when the auth token is missing.
    An empty data set mapping is returned as is; callers decide whether that is fatal.
    """
    root = root or get_root_dir()
    env = resolve_environ(root, environ)
    manifest = read_manifest(root)

    token = load_auth_token(env)
    data_sets = load_data_sets(env, manifest)

    builds_dir = Path(env.get(BUILDS_DIR_VAR) or manifest.get("builds_dir") or ".builds")
    if not builds_dir.is_absolute():
        builds_dir = root / builds_dir

    return JudgeConfig(
        auth_token=token,
        data_sets=data_sets,
        base_url=env.get(BASE_URL_VAR) or manifest.get("base_url") or DEFAULT_BASE_URL,
        builds_dir=builds_dir,
        timeout=_parse_timeout(env.get(TIMEOUT_VAR, manifest.get("timeout"))),
    )


def debug_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    value = (os.environ if environ is None else environ).get(DEBUG_VAR, "")
    return value.lower() in ("1", "true", "yes", "on")
