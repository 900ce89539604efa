"""
Preview handle registry.

Handles are acquired when a job is submitted and released when the store is
cleared. Thumbnails are rendered lazily with Pillow and cached per handle so
a large batch only holds thumbnails that were actually requested.

Dependencies: Pillow
System role: Scoped display resources for submitted images
"""

import io
import logging
import uuid

from PIL import Image, UnidentifiedImageError

from stockmeta.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class PreviewRegistry:
    """Owns the source bytes and rendered thumbnail for every live handle."""

    def __init__(self, size: int = 256) -> None:
        self.size = size
        self._sources: dict[str, bytes] = {}
        self._thumbnails: dict[str, bytes] = {}

    def acquire(self, data: bytes) -> str:
        """Register image bytes and return a new handle."""
        handle = uuid.uuid4().hex
        self._sources[handle] = data
        return handle

    def release(self, handle: str) -> None:
        """Drop a handle and its cached thumbnail. Unknown handles are ignored."""
        self._sources.pop(handle, None)
        self._thumbnails.pop(handle, None)

    def release_all(self) -> int:
        """Drop every handle; returns how many were released."""
        count = len(self._sources)
        self._sources.clear()
        self._thumbnails.clear()
        return count

    def render(self, handle: str) -> bytes:
        """
        Return a JPEG thumbnail for the handle, rendering it on first use.

        Raises:
            KeyError: Handle was never acquired or has been released
            ValidationError: Source bytes are not a decodable image
        """
        cached = self._thumbnails.get(handle)
        if cached is not None:
            return cached

        source = self._sources[handle]
        try:
            with Image.open(io.BytesIO(source)) as img:
                img.thumbnail((self.size, self.size))
                buffer = io.BytesIO()
                img.convert("RGB").save(buffer, format="JPEG", quality=85)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"{__name__}:render - cannot decode handle={handle}: {e}")
            raise ValidationError("Unable to decode image for preview", field="payload") from e

        thumbnail = buffer.getvalue()
        self._thumbnails[handle] = thumbnail
        return thumbnail

    def __contains__(self, handle: object) -> bool:
        return handle in self._sources

    def __len__(self) -> int:
        return len(self._sources)
