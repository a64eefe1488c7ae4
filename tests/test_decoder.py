import sys

import pytest
from PIL import Image

from photoreel import decoder
from photoreel.decoder import decode_image
from photoreel.errors import DecodeError


def save_image(path, size=(20, 10), mode="RGB"):
    Image.new(mode, size, "white").save(path)
    return str(path)


def test_decode_png(tmp_path):
    path = save_image(tmp_path / "a.png")
    decoded = decode_image(path)
    assert decoded.size == (20, 10)
    assert decoded.path == path
    assert decoded.image.size == (20, 10)


def test_decode_missing_file(tmp_path):
    with pytest.raises(DecodeError) as info:
        decode_image(str(tmp_path / "missing.png"))
    assert info.value.path.endswith("missing.png")


def test_decode_corrupt_file(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"\xff\xd8\xff garbage")
    with pytest.raises(DecodeError):
        decode_image(str(path))


def test_decode_directory_is_an_error(tmp_path):
    folder = tmp_path / "dir.png"
    folder.mkdir()
    with pytest.raises(DecodeError):
        decode_image(str(folder))


def test_oversized_images_are_downscaled(tmp_path, monkeypatch):
    monkeypatch.setattr(decoder, "MAX_IMAGE_DIMENSION", 64)
    path = save_image(tmp_path / "big.png", size=(200, 100))
    decoded = decode_image(path)
    assert decoded.size == (64, 32)


def test_large_files_are_refused(tmp_path, monkeypatch):
    monkeypatch.setattr(decoder, "MAX_FILE_SIZE_MB", 0)
    path = save_image(tmp_path / "a.png")
    with pytest.raises(DecodeError, match="too large"):
        decode_image(path)


def test_exif_orientation_is_applied(tmp_path):
    path = tmp_path / "rotated.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    Image.new("RGB", (30, 10)).save(path, exif=exif)
    decoded = decode_image(str(path))
    assert decoded.size == (10, 30)


@pytest.mark.parametrize("name", ["shot.nef", "shot.DNG", "shot.raf"])
def test_raw_without_rawpy_is_a_decode_error(tmp_path, monkeypatch, name):
    monkeypatch.setitem(sys.modules, "rawpy", None)
    path = tmp_path / name
    path.write_bytes(b"raw sensor data")
    with pytest.raises(DecodeError, match="requires rawpy"):
        decode_image(str(path))


def test_raw_files_never_reach_pillow(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr(decoder, "_open_raw", lambda p: opened.append(p) or Image.new("RGB", (8, 6)))
    monkeypatch.setattr(decoder, "_open_pil", lambda p: pytest.fail("raw file opened with Pillow"))
    path = str(tmp_path / "shot.arw")
    (tmp_path / "shot.arw").write_bytes(b"raw sensor data")
    assert decode_image(path).size == (8, 6)
    assert opened == [path]


def test_heif_without_pillow_heif_is_a_decode_error(tmp_path, monkeypatch):
    monkeypatch.setitem(sys.modules, "pillow_heif", None)
    monkeypatch.setattr(decoder, "_heif_registered", False)
    path = tmp_path / "photo.HEIC"
    path.write_bytes(b"\0\0\0\x18ftypheic")
    with pytest.raises(DecodeError, match="requires pillow-heif"):
        decode_image(str(path))
