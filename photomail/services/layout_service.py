"""Layout service: fits a rotated image onto a fixed A4 portrait page.

Coordinates are page points (1/72 inch) in a top-left-origin frame with y
growing downwards.  ``rotation`` is clockwise in that frame, applied about
the draw origin, with the image's top-left corner sitting on the origin.
The page itself is never rotated.
"""
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PAGE_WIDTH = 595
PAGE_HEIGHT = 842

VALID_ROTATIONS = (0, 90, 180, 270)


class InvalidDimensionsError(ValueError):
    """Raised when an image or page size is zero or negative."""


@dataclass(frozen=True)
class Placement:
    draw_origin_x: float
    draw_origin_y: float
    draw_width: float
    draw_height: float
    rotation: int
    scale: float
    box_origin_x: float
    box_origin_y: float
    box_width: float
    box_height: float


def rotated_size(width: float, height: float, rotation: int) -> tuple[float, float]:
    """Bounding box (width, height) of the image once turned by *rotation*."""
    if rotation in (90, 270):
        return height, width
    return width, height


def compose_page(
    width: float,
    height: float,
    rotation: int,
    page_width: float = PAGE_WIDTH,
    page_height: float = PAGE_HEIGHT,
) -> Placement:
    """Compute scale and draw origin so the rotated image is centred and uncropped.

    The scale is uniform and maximal: the rotated bounding box touches the
    page edges on at least one axis.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"Image size must be positive, got {width}x{height}")
    if page_width <= 0 or page_height <= 0:
        raise InvalidDimensionsError(
            f"Page size must be positive, got {page_width}x{page_height}"
        )
    if rotation not in VALID_ROTATIONS:
        raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {rotation!r}")

    bbox_width, bbox_height = rotated_size(width, height, rotation)
    scale = min(page_width / bbox_width, page_height / bbox_height)

    draw_width = width * scale
    draw_height = height * scale

    box_width = bbox_width * scale
    box_height = bbox_height * scale
    box_x = (page_width - box_width) / 2
    box_y = (page_height - box_height) / 2

    # Pivot offsets so the turned image lands exactly on the centred box
    if rotation == 90:
        origin_x, origin_y = box_x + draw_height, box_y
    elif rotation == 180:
        origin_x, origin_y = box_x + draw_width, box_y + draw_height
    elif rotation == 270:
        origin_x, origin_y = box_x, box_y + draw_width
    else:
        origin_x, origin_y = box_x, box_y

    placement = Placement(
        draw_origin_x=origin_x,
        draw_origin_y=origin_y,
        draw_width=draw_width,
        draw_height=draw_height,
        rotation=rotation,
        scale=scale,
        box_origin_x=box_x,
        box_origin_y=box_y,
        box_width=box_width,
        box_height=box_height,
    )
    logger.debug("Page placement: %s", placement)
    return placement
