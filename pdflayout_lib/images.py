# --- pdflayout_lib/images.py ---
"""
pdflayout_lib/images.py: Decodes embedded PDF images with Pillow and encodes
them as self-contained PNG data URLs.
"""
import base64
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from pdfminer.pdftypes import resolve1

from .models import RasterImage

log_images = logging.getLogger("pdflayout.images")

PNG_SAFE_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


def to_data_url(img):
    """Encodes a Pillow image as a base64 PNG data URL."""
    if img.mode not in PNG_SAFE_MODES:
        img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
    buf = BytesIO()
    img.save(buf, "PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def _mode_from_length(data_len, width, height):
    if data_len == width * height * 4:
        return "RGBA"
    if data_len == width * height * 3:
        return "RGB"
    if data_len == width * height:
        return "L"
    return None


def encode_pixels(data, width, height):
    """Turns a flat RGBA/RGB (or gray) pixel buffer into a PNG data URL."""
    mode = _mode_from_length(len(data), width, height)
    if not mode:
        raise ValueError(
            f"Buffer of {len(data)} bytes does not match a {width}x{height} image."
        )
    return to_data_url(Image.frombytes(mode, (width, height), bytes(data)))


def _color_space_name(cs):
    cs = resolve1(cs)
    if isinstance(cs, list) and cs:
        cs = resolve1(cs[0])
    name = getattr(cs, "name", cs)
    if isinstance(name, bytes):
        name = name.decode("latin-1")
    return str(name).lstrip("/") if name else ""


def _rebuild_raw_image(image_data, stream_attrs):
    """Rebuilds a data URL from raw samples using the stream's dictionary.

    Without a usable BitsPerComponent/ColorSpace pair the samples are treated
    as a flat pixel buffer whose mode follows from its length.
    """
    width = resolve1(stream_attrs.get("Width"))
    height = resolve1(stream_attrs.get("Height"))
    if not (width and height):
        log_images.warning("Stream attrs missing Width/Height. Skipping.")
        return None

    size = (int(width), int(height))
    bpc = resolve1(stream_attrs.get("BitsPerComponent"))
    cs = _color_space_name(stream_attrs.get("ColorSpace"))
    mode = None
    if bpc == 1:
        mode = "1"
    elif bpc == 8:
        if cs == "DeviceGray":
            mode = "L"
        elif cs == "DeviceRGB":
            mode = "RGB"
        elif cs == "DeviceCMYK":
            mode = "CMYK"
    if not mode:
        log_images.debug("No color space for raw image of size %s, using length.", size)
        return encode_pixels(image_data, *size)

    log_images.debug("Rebuilding raw image with mode '%s' and size %s", mode, size)
    return to_data_url(Image.frombytes(mode, size, image_data))


def decode_image(lt_image):
    """Decodes a pdfminer LTImage into a RasterImage, or None on failure.

    A failure only drops this image; it is logged and never raised.
    """
    name = getattr(lt_image, "name", "") or ""
    try:
        image_data = lt_image.stream.get_data()
    except Exception as e:
        log_images.warning("Could not read stream of image '%s': %s", name, e)
        return None
    if not image_data:
        log_images.warning("Image '%s' has no data stream, skipping.", name)
        return None

    try:
        try:
            img = Image.open(BytesIO(image_data))
            img.load()
        except UnidentifiedImageError:
            log_images.debug("Image '%s' is not an encoded file, trying raw samples.", name)
            data_url = _rebuild_raw_image(image_data, lt_image.stream.attrs)
        else:
            data_url = to_data_url(img)
        if data_url is None:
            return None
        return RasterImage(data_url=data_url, name=name)
    except Exception as e:
        log_images.warning("Failed to decode image '%s': %s", name, e)
        return None
