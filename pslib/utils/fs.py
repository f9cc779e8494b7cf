"""Filesystem helpers for rendered output and YAML inputs.

The command-line renderer buffers a whole document in memory and hands
it to :func:`atomic_write_text`: the markup lands in a sibling temporary
file, is fsynced, then renamed over the target.  A failed render or a
crash mid-write therefore never leaves a truncated ``.ps`` / ``.eps``
behind.  Library code streams into caller-owned sinks instead and does
not use this module for output.

Usage:
    from pslib.utils import fs
    data = fs.load_yaml("scene.yaml")
    fs.atomic_write_text("out/poster.eps", markup, encoding="latin-1")
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]


def ensure_dir(p: PathLike) -> Path:
    """Create *p* (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(path: PathLike, data: bytes) -> None:
    """Replace *path* with *data* in one rename.

    The temporary file is created in the target directory so the rename
    never crosses filesystems.

    Raises
    ------
    OSError
        If the directory is not writable or the rename fails.  The
        temporary file is removed first.
    """
    path = Path(path)
    directory = ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def atomic_write_text(path: PathLike, text: str, encoding: str = "utf-8") -> None:
    """Encode *text* and write it with :func:`atomic_write_bytes`.

    PostScript output is written as ``latin-1``; characters outside it
    raise ``UnicodeEncodeError`` before anything touches the disk.
    """
    atomic_write_bytes(path, text.encode(encoding))


def load_yaml(path: PathLike) -> Any:
    """Parse a YAML file with ``yaml.safe_load``.

    Returns ``None`` for an empty file; callers decide whether that is
    an error.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    yaml.YAMLError
        On malformed YAML, with the file name in the message.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
