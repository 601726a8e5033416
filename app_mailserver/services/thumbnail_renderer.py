"""
Thumbnail renderer

Renders image attachments into small PNG previews with Pillow.
"""
import io
import logging
from typing import Tuple

from PIL import Image

from common.components.singleton import Singleton

logger = logging.getLogger(__name__)

THUMBNAIL_BOX = (200, 200)

# modes PNG can store as-is
_PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16")


class ThumbnailRenderer(Singleton):

    def render_thumbnail(self, image_data: bytes, box: Tuple[int, int] = THUMBNAIL_BOX) -> bytes:
        """
        Render image bytes as a PNG fitting inside box

        Aspect ratio is preserved and images smaller than box are never enlarged.

        @param image_data: encoded image (any format Pillow reads)
        @param box: (max_width, max_height)
        @return: PNG bytes
        """
        with Image.open(io.BytesIO(image_data)) as image:
            image.thumbnail(box)
            if image.mode not in _PNG_MODES:
                image = image.convert("RGBA")
            output = io.BytesIO()
            image.save(output, format="PNG")

        logger.debug(f"[render_thumbnail] Rendered thumbnail: size={image.size}, bytes={output.tell()}")
        return output.getvalue()
