"""Image reader for handwriting samples.

Decoding compressed image files is outside the analysis core; this module is
the Pillow-based collaborator that turns a file into a RasterImage.
"""

from pathlib import Path

import numpy as np
import structlog
from PIL import Image, UnidentifiedImageError

from handscribe.domain import RasterImage
from handscribe.exceptions import ImageLoadError, InvalidInputError

logger = structlog.get_logger(__name__)


class ImageReader:
    """Loads PNG/JPEG/... files into RasterImage objects.

    Example:
        reader = ImageReader(Path("sample.png"))
        image = reader.load()
        print(image.width, image.height)
    """

    def __init__(self, image_path: Path) -> None:
        """Initialize the image reader.

        Args:
            image_path: Path to the image file
        """
        self._image_path = image_path

    @property
    def path(self) -> Path:
        return self._image_path

    def load(self) -> RasterImage:
        """Decode the image file.

        Transparent pixels are composited onto white paper before the alpha
        channel is dropped.

        Returns:
            RasterImage with RGB pixels

        Raises:
            ImageLoadError: If the file is missing, unreadable or empty
        """
        if not self._image_path.exists():
            raise ImageLoadError(str(self._image_path), "file not found")

        try:
            with Image.open(self._image_path) as img:
                if img.mode in ("RGBA", "LA", "P"):
                    img = img.convert("RGBA")
                    paper = Image.new("RGBA", img.size, (255, 255, 255, 255))
                    img = Image.alpha_composite(paper, img)
                pixels = np.array(img.convert("RGB"))
        except (UnidentifiedImageError, OSError) as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

        try:
            image = RasterImage(pixels)
        except InvalidInputError as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

        logger.debug(
            "Image loaded", path=str(self._image_path), width=image.width, height=image.height
        )
        return image


def load_image(path: Path | str) -> RasterImage:
    """Load an image file as a RasterImage."""
    return ImageReader(Path(path)).load()
