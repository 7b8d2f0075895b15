"""Filesystem helpers for the numeral cache and composed sheets.

The numeral cache treats "file exists" as "artifact complete", so every
write lands in a temporary sibling first and is renamed over the target.
A reader therefore sees either no file or a whole PNG/YAML file.

Usage:
    from cistercian.utils import fs
    fs.ensure_dir(cfg.numerals_directory)
    fs.atomic_save_image(canvas.image, cfg.numerals_directory / "5038.png")
    fs.atomic_yaml_dump({"sheets": names}, sheet_dir / "sheets.yaml")
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Union

import yaml
from PIL import Image

PathLike = Union[str, Path]


class DirectoryCreationError(OSError):
    """A directory could not be created and is still missing."""


class EncodeError(RuntimeError):
    """An image or file could not be written to its target path."""


def ensure_dir(p: PathLike) -> Path:
    """Make sure directory ``p`` exists and return it as a Path.

    Only the final state counts: if another process wins the mkdir race the
    call still succeeds.

    Raises
    ------
    DirectoryCreationError
        If ``p`` is not a directory after the mkdir attempt
    """
    p = Path(p)
    if p.is_dir():
        return p
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        if not p.is_dir():
            raise DirectoryCreationError(f'Directory "{p}" was not created: {e}') from e
    return p


@contextmanager
def _staged(path: Path, tmp_path: Path, errors: tuple) -> Iterator[Path]:
    """Yield ``tmp_path`` for writing, then rename it onto ``path``.

    Any of ``errors`` raised while writing or renaming becomes an EncodeError
    and the temporary file is removed.
    """
    try:
        yield tmp_path
        tmp_path.replace(path)
    except errors as e:
        tmp_path.unlink(missing_ok=True)
        raise EncodeError(f"Failed to write {path}: {e}") from e


def atomic_write_bytes(path: PathLike, data: bytes) -> None:
    """Write ``data`` to ``path`` via ``<path>.tmp``, fsynced before the rename."""
    path = Path(path)
    ensure_dir(path.parent)
    with _staged(path, path.with_suffix(path.suffix + ".tmp"), (OSError,)) as tmp:
        with open(tmp, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())


def atomic_save_image(img: Image.Image, path: PathLike) -> None:
    """Encode ``img`` to ``path`` (format from the extension) atomically.

    RGBA images keep their transparency. The parent directory must exist.

    Raises
    ------
    EncodeError
        If PIL cannot encode the image or the rename fails
    """
    path = Path(path)
    # PIL picks the encoder from the last suffix, so ".tmp" goes before it
    tmp_path = path.with_name(f"{path.stem}.tmp{path.suffix}")
    with _staged(path, tmp_path, (OSError, ValueError)) as tmp:
        img.save(tmp)


def atomic_yaml_dump(obj: Any, path: PathLike) -> None:
    """Dump ``obj`` as block-style YAML, keeping key order."""
    text = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_bytes(path, text.encode('utf-8'))


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """Parse a YAML file; an empty file yields ``{}``.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist
    yaml.YAMLError
        If the content is not valid YAML (message names the file)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
