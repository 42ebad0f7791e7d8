"""
Figure embedder.

Decoding a figure payload and placing it on the page are separate steps:
``decode_image`` turns a data URI into raw bytes plus intrinsic size, and
``place_image`` picks the render size. ``FigureEmbedder`` ties them together
and turns a decode failure into a placeholder block.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import ExportOptions
from ..exceptions import MediaError
from ..models.blocks import Block, ImageBlock, ParagraphBlock
from ..models.thesis import Dimensions, Figure
from ..utils.enums import AlignmentType, ParagraphStyle

logger = logging.getLogger(__name__)

# Pillow format name -> (content type, file extension) for formats a
# word-processor package embeds as-is. Anything else is re-encoded to PNG.
NATIVE_FORMATS = {
    "PNG": ("image/png", "png"),
    "JPEG": ("image/jpeg", "jpeg"),
    "GIF": ("image/gif", "gif"),
    "BMP": ("image/bmp", "bmp"),
}


@dataclass(frozen=True)
class DecodedImage:
    """Raw raster bytes with their intrinsic pixel size."""

    data: bytes = field(repr=False)
    content_type: str
    extension: str
    width: int
    height: int


def _payload(data_uri: str) -> str:
    if data_uri.startswith("data:"):
        header, sep, payload = data_uri.partition(",")
        if not sep:
            raise MediaError("Data URI has no payload", header[:64])
        return payload
    return data_uri


def decode_image(data_uri: Optional[str]) -> DecodedImage:
    """
    Decode a data-URI encoded raster image.

    Args:
        data_uri: ``data:<type>;base64,<payload>`` string, or a bare base64
            payload

    Returns:
        DecodedImage with embeddable bytes and intrinsic size

    Raises:
        MediaError: If the payload is empty, not base64 or not a raster
            image Pillow can read
    """
    if not data_uri or not data_uri.strip():
        raise MediaError("Figure has no image data")

    payload = "".join(_payload(data_uri.strip()).split())
    if not payload:
        raise MediaError("Figure has no image data")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MediaError("Image payload is not valid base64", str(e)) from e

    try:
        with Image.open(io.BytesIO(raw)) as candidate:
            candidate.verify()
        # verify() leaves the image unusable; reopen for size and format
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            width, height = img.size
            fmt = (img.format or "").upper()
            if fmt in NATIVE_FORMATS:
                content_type, extension = NATIVE_FORMATS[fmt]
                return DecodedImage(raw, content_type, extension, width, height)

            converted = img.convert("RGBA") if img.mode not in ("RGB", "RGBA", "L", "LA") else img
            output = io.BytesIO()
            converted.save(output, format="PNG")
            logger.debug(f"Re-encoded {fmt or 'unknown'} image as PNG ({width}x{height})")
            return DecodedImage(output.getvalue(), "image/png", "png", width, height)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise MediaError("Image payload is not a readable raster image", str(e)) from e


def place_image(decoded: DecodedImage, dimensions: Optional[Dimensions],
                options: Optional[ExportOptions] = None) -> Tuple[int, int]:
    """
    Choose the render size of an image in pixels.

    Explicit dimensions win when both are positive; otherwise the configured
    default figure size is used. The intrinsic size of ``decoded`` does not
    influence placement.
    """
    options = options or ExportOptions()
    if dimensions is not None and dimensions.is_usable:
        return int(round(dimensions.width)), int(round(dimensions.height))
    return options.default_figure_width, options.default_figure_height


def figure_description(figure: Figure, number: int) -> str:
    """Accessible description: alt text, then caption, then a generic label."""
    for candidate in (figure.alt_text, figure.caption):
        if candidate and candidate.strip():
            return candidate.strip()
    return f"Figure {number}"


def figure_caption(number: int, caption: str) -> str:
    caption = (caption or "").strip()
    return f"Figure {number}: {caption}" if caption else f"Figure {number}"


class FigureEmbedder:
    """Convert figures into an image block and a caption block."""

    def __init__(self, options: Optional[ExportOptions] = None):
        self.options = options or ExportOptions()

    def embed(self, figure: Figure, number: Optional[int] = None) -> List[Block]:
        """
        Embed one figure.

        Args:
            figure: Figure from the snapshot
            number: Fallback number used when the figure carries none

        Returns:
            ``[ImageBlock, caption ParagraphBlock]`` on success, or a single
            centered placeholder paragraph when the payload cannot be decoded
        """
        number = figure.number if figure.number is not None else (number or 1)
        try:
            decoded = decode_image(figure.image_data)
        except MediaError as e:
            logger.warning(f"Failed to embed figure {figure.id or number}: {e}")
            return [self.placeholder(figure)]

        width, height = place_image(decoded, figure.dimensions, self.options)
        image = ImageBlock(
            data=decoded.data,
            content_type=decoded.content_type,
            extension=decoded.extension,
            width=width,
            height=height,
            description=figure_description(figure, number),
            name=f"Figure {number}",
        )
        caption = ParagraphBlock(
            text=figure_caption(number, figure.caption),
            style=ParagraphStyle.CAPTION,
            alignment=AlignmentType.CENTER,
        )
        return [image, caption]

    @staticmethod
    def placeholder(figure: Figure) -> ParagraphBlock:
        label = (figure.caption or "").strip() or "Untitled"
        return ParagraphBlock(
            text=f"[Error loading figure: {label}]",
            style=ParagraphStyle.PLACEHOLDER,
            alignment=AlignmentType.CENTER,
        )
