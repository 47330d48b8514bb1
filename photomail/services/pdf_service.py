"""PDF service: photo bytes to a single upright A4 page."""
import io
import logging
from dataclasses import dataclass

from photomail.services.layout_service import PAGE_HEIGHT, PAGE_WIDTH, Placement, compose_page
from photomail.services.orientation_service import resolve_rotation

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("JPEG", "PNG")


class ImageDecodeError(ValueError):
    """Raised when the upload is not a readable JPEG or PNG image."""


@dataclass(frozen=True)
class SourceImage:
    data: bytes
    width: int
    height: int
    format: str


def decode_image(image_bytes: bytes) -> SourceImage:
    """Detect the format and read the pixel size of *image_bytes*.

    Only JPEG and PNG are accepted.  The image is fully loaded so truncated
    files fail here rather than while the PDF is being written.
    """
    from PIL import Image

    if not image_bytes:
        raise ImageDecodeError("Empty image")

    try:
        with Image.open(io.BytesIO(image_bytes), formats=SUPPORTED_FORMATS) as img:
            img.load()
            fmt = img.format
            width, height = img.size
    except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Not a readable JPEG or PNG image: {exc}") from exc

    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"Image has no pixels ({width}x{height})")

    return SourceImage(data=image_bytes, width=width, height=height, format=fmt)


def render_pdf(source: SourceImage, placement: Placement) -> bytes:
    """Draw *source* onto one A4 page according to *placement*."""
    from reportlab.lib.utils import ImageReader
    from reportlab.pdfgen import canvas

    img = ImageReader(io.BytesIO(source.data))

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    c.saveState()
    # Switch to the layout frame: origin top-left, y down, rotate() turns clockwise
    c.translate(0, PAGE_HEIGHT)
    c.scale(1, -1)
    c.translate(placement.draw_origin_x, placement.draw_origin_y)
    c.rotate(placement.rotation)
    # drawImage paints bottom-up, so flip back around the image's own height
    c.translate(0, placement.draw_height)
    c.scale(1, -1)
    # keep PNG alpha
    c.drawImage(
        img,
        0,
        0,
        width=placement.draw_width,
        height=placement.draw_height,
        mask="auto",
    )
    c.restoreState()
    c.showPage()
    c.save()
    buf.seek(0)
    return buf.read()


def image_bytes_to_pdf(image_bytes: bytes) -> bytes:
    """Convert an uploaded photo into a one-page A4 portrait PDF.

    The photo is turned upright using its EXIF orientation, turned a further
    quarter if it is still landscape, then scaled to fit and centred.
    """
    source = decode_image(image_bytes)
    logger.info(
        "Decoded %s image %dx%d (%d bytes)",
        source.format,
        source.width,
        source.height,
        len(image_bytes),
    )

    rotation = resolve_rotation(source.data, source.width, source.height)
    placement = compose_page(source.width, source.height, rotation)
    pdf_bytes = render_pdf(source, placement)

    logger.info(
        "Rendered PDF: rotation=%d scale=%.4f bytes=%d",
        rotation,
        placement.scale,
        len(pdf_bytes),
    )
    return pdf_bytes
