"""
Units converter for WordprocessingML output.

Converts pixels to EMU for drawings and points or inches to the twip and
half-point units used by page geometry, spacing and font sizes.
"""

from typing import Union
import logging

logger = logging.getLogger(__name__)

Number = Union[int, float]

EMU_PER_INCH = 914400
TWIPS_PER_INCH = 1440
TWIPS_PER_POINT = 20


class UnitsConverter:
    """
    Converts between the units used when writing DOCX parts.

    Pixel values are interpreted at the converter's DPI (96 by default,
    which is what Word assumes for images without a pHYs chunk).
    """

    def __init__(self, dpi: int = 96):
        """
        Initialize units converter.

        Args:
            dpi: Dots per inch for pixel conversions
        """
        if dpi <= 0:
            raise ValueError("DPI must be positive")
        self.dpi = dpi
        logger.debug(f"Units converter initialized with DPI: {dpi}")

    @staticmethod
    def _check(value: Number, unit: str) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{unit} value must be a number")

    def pixels_to_emu(self, pixels: Number) -> int:
        """
        Convert pixels to EMU.

        Args:
            pixels: Pixel value to convert

        Returns:
            EMU value rounded to an integer
        """
        self._check(pixels, "Pixel")
        return int(round(pixels * EMU_PER_INCH / self.dpi))

    def inches_to_twips(self, inches: Number) -> int:
        """Convert inches to twips."""
        self._check(inches, "Inch")
        return int(round(inches * TWIPS_PER_INCH))

    def points_to_half_points(self, points: Number) -> int:
        """Convert points to the half-point unit used by w:sz."""
        self._check(points, "Point")
        return int(round(points * 2))

    def points_to_twips(self, points: Number) -> int:
        """Convert points to twips (used by spacing attributes)."""
        self._check(points, "Point")
        return int(round(points * TWIPS_PER_POINT))
