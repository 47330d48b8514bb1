"""Orientation service: works out how far a photo must turn to sit upright on a portrait page.

The EXIF Orientation tag only distinguishes the four plain rotations here.
Mirrored variants (2, 4, 5, 7) are treated as "no rotation"; mirrored
sources will render flipped.
"""
import io
import logging
from typing import Optional

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112

# Raw EXIF orientation -> clockwise degrees
ORIENTATION_DEGREES = {
    1: 0,
    3: 180,
    6: 90,
    8: 270,
}


def read_orientation_tag(image_bytes: bytes) -> Optional[int]:
    """Return the raw EXIF orientation value, or None when it cannot be read."""
    from PIL import Image

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return img.getexif().get(ORIENTATION_TAG)
    except Exception as exc:
        logger.debug("Could not read EXIF orientation: %s", exc)
        return None


def normalize_orientation(tag) -> int:
    """Map a raw orientation value to 0, 90, 180 or 270 degrees."""
    if not isinstance(tag, int):
        return 0
    return ORIENTATION_DEGREES.get(tag, 0)


def orientation_hint(image_bytes: bytes) -> int:
    return normalize_orientation(read_orientation_tag(image_bytes))


def apply_portrait_correction(hint: int, width: int, height: int) -> int:
    """Add a quarter turn when the image still reads as landscape after *hint*."""
    if hint in (90, 270):
        display_width, display_height = height, width
    else:
        display_width, display_height = width, height

    if display_width > display_height:
        return (hint + 90) % 360
    return hint


def resolve_rotation(image_bytes: bytes, width: int, height: int) -> int:
    """Return the clockwise rotation (0/90/180/270) that shows the image upright in portrait.

    ``width`` and ``height`` are the stored (unrotated) pixel dimensions.
    Missing or unreadable metadata counts as no rotation; this never raises
    for metadata problems.
    """
    hint = orientation_hint(image_bytes)
    rotation = apply_portrait_correction(hint, width, height)
    logger.debug(
        "Resolved rotation: hint=%d size=%dx%d rotation=%d",
        hint,
        width,
        height,
        rotation,
    )
    return rotation
