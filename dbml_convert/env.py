"""Load converter settings from the environment, filling gaps from a .env file."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_FORMAT = "csv"
DEFAULT_LOG_LEVEL = "WARNING"

FORMAT_VAR = "DBML_CONVERT_FORMAT"
LOG_LEVEL_VAR = "DBML_CONVERT_LOG_LEVEL"


def load_env() -> None:
    """Load the first .env found in the working directory or the project root.

    Existing environment variables win, so shell exports override the file.
    """
    for base in (Path.cwd(), Path(__file__).resolve().parent.parent):
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            return


def default_format() -> str:
    return (os.environ.get(FORMAT_VAR, "").strip() or DEFAULT_FORMAT).lower()


def log_level(verbose: bool = False) -> int:
    if verbose:
        return logging.INFO
    name = os.environ.get(LOG_LEVEL_VAR, "").strip().upper() or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING
