"""Durable file writes for exported CSV text and workbook bytes."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Union

from dbml_convert.errors import ExportWriteError, SchemaStructureError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_directory(dir_path: PathLike) -> Path:
    """Create the directory if needed; a concurrent creator is not an error."""
    path = Path(dir_path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportWriteError(path, e) from e
    return path


def _stage(target: Path, data: bytes) -> str:
    """Write ``data`` to a fsynced temporary sibling of ``target``; return its name."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except OSError:
        os.unlink(tmp_name)
        raise
    return tmp_name


def _discard(tmp_names) -> None:
    for name in tmp_names:
        if os.path.exists(name):
            os.unlink(name)


def write_file_atomic(file_path: PathLike, data: bytes) -> Path:
    """Write ``data`` so that readers only ever see the complete file.

    Bytes go to a temporary sibling which is flushed, fsynced and then
    renamed over the target. Returns only after the data is durable.
    """
    target = Path(file_path)
    ensure_directory(target.parent)
    tmp_name = None
    try:
        tmp_name = _stage(target, data)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        raise ExportWriteError(target, e) from e
    finally:
        if tmp_name is not None:
            _discard([tmp_name])
    logger.info("Wrote %s (%d bytes)", target, len(data))
    return target


def write_csv_file(file_path: PathLike, content: str) -> Path:
    return write_file_atomic(file_path, content.encode("utf-8"))


def _is_plain_filename(name: str) -> bool:
    if not name or name in (".", ".."):
        return False
    separators = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())
    return not any(sep in name for sep in separators)


def resolve_in_directory(directory: Path, name: str) -> Path:
    """Join ``name`` onto ``directory``, refusing anything that would land elsewhere."""
    target = directory / name
    if not _is_plain_filename(name) or target.resolve().parent != directory.resolve():
        raise SchemaStructureError(f"Invalid output file name '{name}': must be a plain file name")
    return target


def write_multiple_csv_files(output_dir: PathLike, files: Dict[str, str]) -> List[Path]:
    """Write every file or none of them.

    Names are checked first, then all contents are staged as temporary
    files; only once every file is durable are they renamed into place.
    """
    directory = Path(output_dir)
    targets = [(resolve_in_directory(directory, name), content) for name, content in files.items()]
    ensure_directory(directory)

    staged = []
    try:
        for target, content in targets:
            staged.append((_stage(target, content.encode("utf-8")), target))
    except OSError as e:
        _discard(name for name, _ in staged)
        raise ExportWriteError(target, e) from e

    try:
        for tmp_name, target in staged:
            os.replace(tmp_name, target)
    except OSError as e:
        _discard(name for name, _ in staged)
        raise ExportWriteError(target, e) from e

    for _, target in staged:
        logger.info("Wrote %s", target)
    return [target for _, target in staged]
