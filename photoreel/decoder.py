"""Image decoding - turns a path into a DecodedImage using Pillow.

HEIC/HEIF support comes from pillow-heif and camera raw formats from rawpy.
Both are optional; without them those files fail with DecodeError like any
other undecodable file.
"""

from __future__ import annotations
import os
import threading

from PIL import Image, ImageOps

from .config import HEIF_EXTS, MAX_FILE_SIZE_MB, MAX_IMAGE_DIMENSION, RAW_EXTS
from .errors import DecodeError
from .image_utils import get_file_size_mb
from .logging import log
from .types import DecodedImage

_PIL_ERRORS = (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError)

_heif_lock = threading.Lock()
_heif_registered = False


def ensure_heif_opener(path: str) -> None:
    """Register the pillow-heif opener once; DecodeError if it is missing."""
    global _heif_registered
    with _heif_lock:
        if _heif_registered:
            return
        try:
            from pillow_heif import register_heif_opener
        except ImportError as e:
            raise DecodeError(path, "HEIF support requires pillow-heif") from e
        register_heif_opener()
        _heif_registered = True


def _open_raw(path: str) -> Image.Image:
    try:
        import rawpy
    except ImportError as e:
        raise DecodeError(path, "RAW support requires rawpy") from e
    try:
        with rawpy.imread(path) as raw_file:
            arr = raw_file.postprocess(output_bps=8, use_camera_wb=True, no_auto_bright=False)
    except (rawpy.LibRawError, OSError) as e:
        raise DecodeError(path, repr(e)) from e
    return Image.fromarray(arr)


def _open_pil(path: str) -> Image.Image:
    try:
        with Image.open(path) as src:
            img = ImageOps.exif_transpose(src)
            img.load()
    except _PIL_ERRORS as e:
        raise DecodeError(path, repr(e)) from e
    return img


def decode_image(path: str) -> DecodedImage:
    """Decode an image file, applying EXIF orientation and size limits.

    Args:
        path: Path to image file.

    Returns:
        DecodedImage with the Pillow image and its final dimensions.

    Raises:
        DecodeError: The file is missing, too large, corrupt or unsupported.
    """
    if not os.path.isfile(path):
        raise DecodeError(path, "not a readable file")

    file_size_mb = get_file_size_mb(path)
    if file_size_mb > MAX_FILE_SIZE_MB:
        raise DecodeError(path, f"file too large: {file_size_mb:.1f}MB")

    ext = os.path.splitext(path)[1].lower()
    if ext in RAW_EXTS:
        img = _open_raw(path)
    else:
        if ext in HEIF_EXTS:
            ensure_heif_opener(path)
        img = _open_pil(path)

    w, h = img.size
    if w <= 0 or h <= 0:
        raise DecodeError(path, "empty image")

    if w > MAX_IMAGE_DIMENSION or h > MAX_IMAGE_DIMENSION:
        img.thumbnail((MAX_IMAGE_DIMENSION, MAX_IMAGE_DIMENSION), Image.Resampling.LANCZOS)
        log(f"[DECODE][RESIZE] {os.path.basename(path)}: {w}x{h} -> {img.width}x{img.height}")

    return DecodedImage(image=img, width=img.width, height=img.height, path=path)
