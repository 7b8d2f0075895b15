"""Render cache keyed by artifact name.

The renderers never check for files themselves; they hand a key and a
render function to an ``ArtifactCache``:

    path = cache.get_or_render("5038", lambda: draw_numeral(5038))

``FileArtifactCache`` is the production cache: ``{directory}/{key}.png``,
where an existing file counts as a hit and is never rewritten.
``MemoryArtifactCache`` keeps encoded PNG bytes in a dict and is meant for
tests and dry runs.

Neither cache locks: two writers racing on one key both render, and the
atomic rename leaves one complete file.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePath
from typing import Callable, ContextManager

from PIL import Image

from cistercian.numerals.canvas import Canvas
from cistercian.utils import fs

logger = logging.getLogger(__name__)

RenderFn = Callable[[], ContextManager[Canvas]]
"""Zero-argument callable returning a context manager over a drawn canvas."""


class ArtifactCache(ABC):
    """Memoizes rendered images by key."""

    @abstractmethod
    def locate(self, key: str) -> PurePath:
        """Path the artifact for ``key`` is (or would be) stored at."""

    @abstractmethod
    def contains(self, key: str) -> bool:
        """True if ``key`` has already been rendered."""

    @abstractmethod
    def store(self, key: str, image: Image.Image) -> None:
        """Encode ``image`` as the artifact for ``key``."""

    @abstractmethod
    def open(self, key: str) -> Image.Image:
        """Load a fully decoded copy of the artifact for ``key``."""

    def get_or_render(self, key: str, render: RenderFn) -> PurePath:
        """Return the artifact path for ``key``, rendering it on a miss.

        ``render`` is only called on a miss; the canvas it yields is
        released once stored.
        """
        if self.contains(key):
            logger.debug("Cache hit: %s", key)
            return self.locate(key)

        with render() as canvas:
            self.store(key, canvas.image)
        logger.debug("Rendered %s", key)
        return self.locate(key)


class FileArtifactCache(ArtifactCache):
    """PNG files in one directory; the file's existence is the cache entry."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def locate(self, key: str) -> Path:
        return self.directory / f"{key}.png"

    def contains(self, key: str) -> bool:
        return self.locate(key).exists()

    def store(self, key: str, image: Image.Image) -> None:
        fs.ensure_dir(self.directory)
        fs.atomic_save_image(image, self.locate(key))

    def open(self, key: str) -> Image.Image:
        with Image.open(self.locate(key)) as img:
            img.load()
            return img.copy()

    def get_or_render(self, key: str, render: RenderFn) -> Path:
        fs.ensure_dir(self.directory)
        return super().get_or_render(key, render)


class MemoryArtifactCache(ArtifactCache):
    """In-process cache holding encoded PNG bytes."""

    def __init__(self):
        self.artifacts: dict[str, bytes] = {}
        self.renders = 0

    def locate(self, key: str) -> PurePath:
        return PurePath(f"{key}.png")

    def contains(self, key: str) -> bool:
        return key in self.artifacts

    def store(self, key: str, image: Image.Image) -> None:
        buffer = io.BytesIO()
        try:
            image.save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            raise fs.EncodeError(f"Failed to encode {key}: {e}") from e
        self.artifacts[key] = buffer.getvalue()
        self.renders += 1

    def open(self, key: str) -> Image.Image:
        with Image.open(io.BytesIO(self.artifacts[key])) as img:
            img.load()
            return img.copy()
