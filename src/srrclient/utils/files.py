# srrclient/utils/files.py
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Optional, Union

logger = logging.getLogger(__name__)


def member_path(name: str, prune_paths: bool = False) -> Path:
    """
    Turn a stored file name into a relative output path.

    SRR files written on Windows use backslashes; both separators are
    honoured. Absolute paths and ``..`` components are dropped so a member
    can never land outside the output directory.
    """
    parts = [p for p in PurePosixPath(name.replace("\\", "/")).parts if p not in ("/", "..", ".")]
    if not parts:
        raise ValueError(f"Stored file name '{name}' has no usable path")
    if prune_paths:
        return Path(parts[-1])
    return Path(*parts)


def save_file(name: str, data: bytes, prune_paths: bool = False,
              base_dir: Optional[Union[str, os.PathLike]] = None) -> Path:
    """
    Write ``data`` under ``base_dir`` (the working directory by default),
    creating parent directories unless ``prune_paths`` keeps only the base name.

    Returns the path written. OSError propagates to the caller.
    """
    path = Path(base_dir or ".") / member_path(name, prune_paths)
    if not prune_paths:
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path
