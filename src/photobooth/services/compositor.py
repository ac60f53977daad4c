"""Image transforms for styled photo output.

Every generated image is stretched onto one of two fixed canvases, framed by a
white border, and optionally branded with the event logo in the bottom-right
corner. Functions here are pure: bytes in, bytes out.
"""

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from photobooth.domain.generation import CompositeResult, Orientation
from photobooth.errors import ValidationError

LANDSCAPE_CANVAS = (1248, 832)
PORTRAIT_CANVAS = (832, 1248)
LOGO_BOX = (180, 180)
BORDER_WIDTH = 7
BORDER_COLOR = (255, 255, 255)
JPEG_QUALITY = 90
OUTPUT_MIME_TYPE = "image/jpeg"

SUPPORTED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})


def canvas_size(orientation: Orientation) -> tuple[int, int]:
    """Return the (width, height) canvas for an orientation."""
    if orientation is Orientation.LANDSCAPE:
        return LANDSCAPE_CANVAS
    return PORTRAIT_CANVAS


def detect_mime_type(data: bytes) -> str | None:
    """Infer an accepted image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def validate_image(data: bytes, label: str = "image") -> str:
    """Ensure bytes are a non-empty png/jpeg/webp buffer and return its type."""
    if not data:
        raise ValidationError(f"{label} data is empty", code="EMPTY_IMAGE")
    mime_type = detect_mime_type(data)
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise ValidationError(
            f"Unsupported {label} type", code="UNSUPPORTED_IMAGE_TYPE"
        )
    return mime_type


def read_orientation(data: bytes) -> Orientation:
    """Validate a source photo and return its orientation."""
    image = _open(data, "source image")
    return Orientation.from_size(image.width, image.height)


def normalize_to_canvas(image: Image.Image, orientation: Orientation) -> Image.Image:
    """Stretch an image to the exact canvas size, ignoring its aspect ratio."""
    target = canvas_size(orientation)
    rgb = image.convert("RGB")
    if rgb.size == target:
        return rgb
    return rgb.resize(target, Image.Resampling.LANCZOS)


def add_border(main_image: bytes, orientation: Orientation) -> CompositeResult:
    """Frame the normalized image with a white border."""
    main = _open(main_image, "main image")
    canvas = _framed_canvas(normalize_to_canvas(main, orientation))
    return _encode(canvas)


def merge_logo(
    main_image: bytes, logo_image: bytes, orientation: Orientation
) -> CompositeResult:
    """Frame the normalized image and anchor the logo bottom-right."""
    main = _open(main_image, "main image")
    logo = _fit_logo(_open(logo_image, "logo image"))
    canvas = _framed_canvas(normalize_to_canvas(main, orientation))
    position = (
        canvas.width - LOGO_BOX[0] - BORDER_WIDTH,
        canvas.height - LOGO_BOX[1] - BORDER_WIDTH,
    )
    canvas.paste(logo, position, logo)
    return _encode(canvas)


def _open(data: bytes, label: str) -> Image.Image:
    validate_image(data, label)
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except Image.DecompressionBombError as exc:
        raise ValidationError(
            f"{label} dimensions are too large", code="INVALID_IMAGE"
        ) from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError(
            f"{label} could not be decoded", code="INVALID_IMAGE"
        ) from exc
    return image


def _fit_logo(logo: Image.Image) -> Image.Image:
    """Contain-fit the logo into the logo box on a transparent background."""
    fitted = ImageOps.contain(logo.convert("RGBA"), LOGO_BOX, Image.Resampling.LANCZOS)
    box = Image.new("RGBA", LOGO_BOX, (255, 255, 255, 0))
    offset = ((LOGO_BOX[0] - fitted.width) // 2, (LOGO_BOX[1] - fitted.height) // 2)
    box.paste(fitted, offset, fitted)
    return box


def _framed_canvas(main: Image.Image) -> Image.Image:
    canvas = Image.new(
        "RGB",
        (main.width + BORDER_WIDTH * 2, main.height + BORDER_WIDTH * 2),
        BORDER_COLOR,
    )
    canvas.paste(main, (BORDER_WIDTH, BORDER_WIDTH))
    return canvas


def _encode(canvas: Image.Image) -> CompositeResult:
    buffer = BytesIO()
    canvas.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return CompositeResult(
        data=buffer.getvalue(),
        mime_type=OUTPUT_MIME_TYPE,
        width=canvas.width,
        height=canvas.height,
    )
