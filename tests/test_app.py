import io

import pytest

from photoreel.app import Application
from photoreel.cli import parse_args
from photoreel.input_handler import InputHandler
from photoreel.renderer import Renderer


def scripted(lines):
    feed = iter(lines)
    return lambda: next(feed, None)


@pytest.fixture
def make_app(session):
    def build(lines):
        out = io.StringIO()
        app = Application(
            session=session,
            renderer=Renderer(out=out),
            input_handler=InputHandler(),
            read_line=scripted(lines),
        )
        return app, out
    return build


def test_console_session_walks_the_folder(make_app, photo_dir, loader):
    app, out = make_app(["", "", "p", "3", "q"])
    assert app.initialize([str(photo_dir)])
    app.run()

    frames = out.getvalue()
    assert "img1.png  (1 / 3)" in frames
    assert "img2.png  (2 / 3)" in frames
    assert "img10.png  (3 / 3)" in frames
    assert app.session.index == 2
    assert not app.running
    assert loader.shut_down


def test_help_and_info_toggle(make_app, photo_dir):
    app, out = make_app(["?", "i", "q"])
    app.initialize([str(photo_dir / "img2.png")])
    app.run()

    text = out.getvalue()
    assert "toggle info panel" in text
    assert "  Name             img2.png" in text


def test_end_of_input_stops_loop(make_app, photo_dir):
    app, _ = make_app([])
    app.initialize([str(photo_dir)])
    app.run()
    assert not app.running


def test_initialize_without_paths_loads_cwd(make_app, photo_dir, monkeypatch):
    monkeypatch.chdir(photo_dir)
    app, _ = make_app(["q"])
    assert app.initialize([])
    app.run()
    assert app.session.count == 3


def test_initialize_with_nothing_openable(make_app, tmp_path):
    app, _ = make_app(["q"])
    assert app.initialize([str(tmp_path / "missing.png")]) is False


def test_cli_arguments():
    args = parse_args(["a.png", "--cache", "4", "--workers", "2", "--quiet"])
    assert args.paths == ["a.png"]
    assert (args.cache, args.workers, args.quiet) == (4, 2, True)


def test_cli_rejects_zero_cache():
    with pytest.raises(SystemExit):
        parse_args(["--cache", "0"])
