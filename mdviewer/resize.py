# mdviewer/resize.py
"""Aspect-preserving raster image resizing."""

from io import BytesIO

from PIL import Image, UnidentifiedImageError


class ImageResizeError(Exception):
    """Raised when an image cannot be decoded or re-encoded."""


def resize_image(image_data: bytes, target_width: int) -> bytes:
    """Resize an image to target_width pixels wide, keeping its aspect ratio.

    The result is always PNG-encoded (lossless). When the image is already
    target_width wide the original bytes are returned.

    Args:
        image_data: Encoded image bytes (PNG, JPEG, GIF, WebP).
        target_width: Desired width in pixels.

    Returns:
        Encoded image bytes.

    Raises:
        ImageResizeError: If the image cannot be decoded or encoded, or
            target_width is not positive.
    """
    if target_width <= 0:
        raise ImageResizeError(f"invalid target width: {target_width}")

    try:
        img = Image.open(BytesIO(image_data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageResizeError(f"failed to decode image: {e}") from e

    orig_w, orig_h = img.size
    if orig_w == target_width:
        return image_data

    target_height = max(1, int(target_width * (orig_h / orig_w)))

    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    resized = img.resize((target_width, target_height), Image.Resampling.BILINEAR)

    buf = BytesIO()
    try:
        resized.save(buf, format="PNG")
    except OSError as e:
        raise ImageResizeError(f"failed to encode resized image: {e}") from e

    return buf.getvalue()
