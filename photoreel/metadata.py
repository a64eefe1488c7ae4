"""Metadata pipeline - reads image properties and builds the info list.

read_properties() normalizes what Pillow exposes into property groups:

    {
        "PixelWidth": 4000, "PixelHeight": 3000, "ColorSpace": "sRGB",
        "Exif": {"DateTimeOriginal": ..., "ExposureTime": ..., ...},
        "GPS": {"Latitude": 48.85, "Longitude": 2.29},
        "TIFF": {"Make": ..., "Model": ...},
    }

build_fields() turns that mapping plus the file's stat into ordered
(label, value) rows. Rows without source data are left out.
"""

from __future__ import annotations
import math
import os
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from PIL import ExifTags, Image

from .config import DATE_FORMAT, EXIF_DATE_FORMAT, GPS_DECIMALS, HEIF_EXTS, RAW_EXTS
from .decoder import ensure_heif_opener
from .errors import DecodeError
from .image_utils import format_file_size
from .logging import log
from .types import Entry, MetadataResult

EXIF_IFD = 0x8769
GPS_IFD = 0x8825

_EXIF_COLOR_SPACES = {1: "sRGB", 2: "Adobe RGB", 0xFFFF: "Uncalibrated"}
_MODE_NAMES = {
    "1": "Gray", "L": "Gray", "LA": "Gray", "I": "Gray", "I;16": "Gray", "F": "Gray",
    "P": "Indexed", "PA": "Indexed",
    "RGB": "RGB", "RGBA": "RGB", "RGBX": "RGB", "RGBa": "RGB",
    "CMYK": "CMYK", "YCbCr": "YCbCr", "LAB": "Lab", "HSV": "HSV",
}

Properties = Dict[str, Any]


# ═══════════════════════════════════════════════════════════════════════════
# Value conversion
# ═══════════════════════════════════════════════════════════════════════════

def _to_float(value: Any) -> Optional[float]:
    """Rationals, tuples and numbers to float; None if not a finite number."""
    if isinstance(value, tuple) and len(value) == 2:
        num, den = value
        if not den:
            return None
        value = num / den
    try:
        result = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return result if math.isfinite(result) else None


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if value is None:
        return None
    text = str(value).strip("\x00 ").strip()
    return text or None


def _dms_to_degrees(dms: Any, ref: Any) -> Optional[float]:
    if not isinstance(dms, (tuple, list)) or len(dms) != 3:
        return None
    parts = [_to_float(p) for p in dms]
    if any(p is None for p in parts):
        return None
    degrees = parts[0] + parts[1] / 60.0 + parts[2] / 3600.0
    if _to_text(ref) in ("S", "W"):
        degrees = -degrees
    return degrees


def _named(ifd: Mapping[int, Any], names: Mapping[int, str]) -> Dict[str, Any]:
    return {names.get(tag, str(tag)): value for tag, value in ifd.items()}


def _color_space(img: Image.Image, exif_group: Mapping[str, Any]) -> Optional[str]:
    tagged = exif_group.get("ColorSpace")
    if tagged in _EXIF_COLOR_SPACES:
        return _EXIF_COLOR_SPACES[tagged]
    return _MODE_NAMES.get(img.mode, img.mode or None)


# ═══════════════════════════════════════════════════════════════════════════
# Property reading
# ═══════════════════════════════════════════════════════════════════════════

def _read_raw_size(path: str) -> Optional[Tuple[int, int]]:
    """Sensor output size of a camera raw file, or None if rawpy cannot tell."""
    try:
        import rawpy
    except ImportError:
        log(f"[META] rawpy not installed, no raw size for {os.path.basename(path)}")
        return None
    try:
        with rawpy.imread(path) as raw_file:
            sizes = raw_file.sizes
    except (rawpy.LibRawError, OSError) as e:
        log(f"[META] Cannot read raw size of {os.path.basename(path)}: {e!r}")
        return None
    return sizes.width, sizes.height


def _read_pillow_properties(path: str) -> Optional[Properties]:
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            tiff_group = _named(exif, ExifTags.TAGS)
            exif_group = _named(exif.get_ifd(EXIF_IFD), ExifTags.TAGS)
            gps_raw = _named(exif.get_ifd(GPS_IFD), ExifTags.GPSTAGS)
            props: Properties = {
                "PixelWidth": img.width,
                "PixelHeight": img.height,
                "ColorSpace": _color_space(img, exif_group),
            }
    except (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError) as e:
        log(f"[META] Cannot read properties of {os.path.basename(path)}: {e!r}")
        return None

    tiff_group.pop("ExifOffset", None)
    tiff_group.pop("GPSInfo", None)

    gps_group: Dict[str, Any] = {}
    lat = _dms_to_degrees(gps_raw.get("GPSLatitude"), gps_raw.get("GPSLatitudeRef"))
    lon = _dms_to_degrees(gps_raw.get("GPSLongitude"), gps_raw.get("GPSLongitudeRef"))
    if lat is not None and lon is not None:
        gps_group["Latitude"] = lat
        gps_group["Longitude"] = lon

    if exif_group:
        props["Exif"] = exif_group
    if gps_group:
        props["GPS"] = gps_group
    if tiff_group:
        props["TIFF"] = tiff_group
    return props


def read_properties(path: str) -> Optional[Properties]:
    """Read image properties without decoding pixels.

    Camera raw files take their pixel size from rawpy; Pillow only sees the
    embedded preview of TIFF-based raws, but still supplies their EXIF.

    Returns:
        Property mapping, or None if the file cannot be parsed as an image.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext in HEIF_EXTS:
        try:
            ensure_heif_opener(path)
        except DecodeError as e:
            log(f"[META] {e}")
            return None

    props = _read_pillow_properties(path)
    if ext not in RAW_EXTS:
        return props

    raw_size = _read_raw_size(path)
    if raw_size is None:
        return props
    if props is None:
        props = {}
    props["PixelWidth"], props["PixelHeight"] = raw_size
    return props


# ═══════════════════════════════════════════════════════════════════════════
# Formatting
# ═══════════════════════════════════════════════════════════════════════════

def format_exif_date(value: str) -> str:
    try:
        dt = datetime.strptime(value, EXIF_DATE_FORMAT)
    except (ValueError, TypeError):
        return value
    return dt.strftime(DATE_FORMAT)


def format_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime(DATE_FORMAT)


def format_exposure_time(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.1f}s"
    # Rounded, not truncated: 1/x of a rational exposure can fall just short
    return f"1/{round(1 / seconds)}s"


def _first(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return value[0] if value else None
    return value


def build_fields(props: Properties, st: Optional[os.stat_result] = None) -> List[Tuple[str, str]]:
    """Assemble (label, value) rows in presentation order."""
    exif = props.get("Exif") or {}
    tiff = props.get("TIFF") or {}
    gps = props.get("GPS") or {}
    fields: List[Tuple[str, str]] = []

    def add(label: str, value: Optional[str]) -> None:
        if value:
            fields.append((label, value))

    date_taken = _to_text(exif.get("DateTimeOriginal"))
    if date_taken:
        add("Date Taken", format_exif_date(date_taken))

    if st is not None:
        add("File Size", format_file_size(st.st_size))

    width, height = props.get("PixelWidth"), props.get("PixelHeight")
    if width and height:
        add("Dimensions", f"{width} × {height}")

    add("Color Space", _to_text(props.get("ColorSpace")))

    exposure = _to_float(exif.get("ExposureTime"))
    if exposure and exposure > 0:
        add("Exposure Time", format_exposure_time(exposure))

    f_number = _to_float(exif.get("FNumber"))
    if f_number:
        add("F-Number", f"f/{f_number:.1f}")

    iso = _first(exif.get("ISOSpeedRatings"))
    if iso is not None:
        add("ISO", str(iso))

    focal = _to_float(exif.get("FocalLength"))
    if focal:
        add("Focal Length", f"{int(focal)}mm")

    add("Lens", _to_text(exif.get("LensModel")))
    add("Camera Make", _to_text(exif.get("Make")) or _to_text(tiff.get("Make")))
    add("Camera Model", _to_text(exif.get("Model")) or _to_text(tiff.get("Model")))

    lat, lon = gps.get("Latitude"), gps.get("Longitude")
    if lat is not None and lon is not None:
        add("GPS Coordinates", f"{lat:.{GPS_DECIMALS}f}, {lon:.{GPS_DECIMALS}f}")

    if st is not None:
        add("Modified", format_timestamp(st.st_mtime))
        birth = getattr(st, "st_birthtime", None)
        if birth:
            add("Created", format_timestamp(birth))

    return fields


def extract_metadata(entry: Entry,
                     reader: Callable[[str], Optional[Properties]] = read_properties) -> MetadataResult:
    """Build the metadata result for one entry. Runs on a background worker."""
    props = reader(entry.path)
    if props is None:
        return MetadataResult(entry=entry, fields=())

    try:
        st = os.stat(entry.path)
    except OSError as e:
        log(f"[META] stat failed for {entry.name}: {e!r}")
        st = None

    fields = build_fields(props, st)
    log(f"[META] {entry.name}: {len(fields)} fields")
    return MetadataResult(entry=entry, fields=tuple(fields))
