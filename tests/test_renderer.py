import io

from photoreel.renderer import Renderer
from photoreel.state import SessionSnapshot
from photoreel.types import DecodedImage, Entry, MetadataResult

A = Entry("/pics/a.png")
B = Entry("/pics/b.png")


def render(**kwargs):
    return Renderer(out=io.StringIO()).render(SessionSnapshot(**kwargs))


def test_empty_and_scanning_headers():
    assert render() == ["No images"]
    assert render(scanning=True) == ["Loading photos..."]


def test_header_shows_position_and_decode_state():
    lines = render(images=(A, B), index=1, scanning=True)
    assert lines == ["b.png  (2 / 2)  [scanning]", "  decoding..."]


def test_image_line_shows_size_and_fit_mode():
    image = DecodedImage(image=object(), width=640, height=480, path=A.path)
    assert render(images=(A,), current_image=image)[1] == "  640 x 480 (fit)"
    assert render(images=(A,), current_image=image, fit_to_window=False)[1] == "  640 x 480 (actual size)"


def test_image_error_line():
    lines = render(images=(A,), image_error="cannot decode a.png: bad")
    assert lines[1] == "  image unavailable: cannot decode a.png: bad"


def test_scan_error_is_shown_under_header():
    lines = render(images=(A,), scan_error="cannot scan /x: gone")
    assert lines[:2] == ["a.png  (1 / 1)", "  cannot scan /x: gone"]


def test_info_panel_states():
    assert render(images=(A,), info_visible=True)[-1] == "  Loading info..."
    empty = MetadataResult(entry=A, fields=())
    assert render(images=(A,), info_visible=True, metadata=empty)[-1] == "  No info available"

    meta = MetadataResult(entry=A, fields=(("ISO", "200"), ("Lens", "35mm")))
    lines = render(images=(A,), info_visible=True, metadata=meta)
    assert lines[-2:] == ["  ISO              200", "  Lens             35mm"]


def test_info_hidden_when_toggled_off():
    meta = MetadataResult(entry=A, fields=(("ISO", "200"),))
    assert render(images=(A,), metadata=meta) == ["a.png  (1 / 1)", "  decoding..."]


def test_draw_frame_writes_lines():
    out = io.StringIO()
    Renderer(out=out).draw_frame(SessionSnapshot())
    assert out.getvalue() == "No images\n"


def test_decoding_line_follows_image_loading():
    waiting = SessionSnapshot(images=(A,))
    assert waiting.image_loading
    assert render(images=(A,))[1] == "  decoding..."

    failed = SessionSnapshot(images=(A,), image_error="bad")
    assert not failed.image_loading
    assert not SessionSnapshot().image_loading
