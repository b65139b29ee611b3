"""Tests for KeycastSession: activation, the key pipeline and overlay output."""

import threading
from unittest.mock import MagicMock

import pytest

from keycast.config import Config
from keycast.renderer import center
from keycast.session import KeycastSession, OverlayError
from keycast.translate import EventKind


class FakeSurface:
    """Records what the session writes to the overlay."""

    def __init__(self, height: int):
        self.lines = ["<unset>"] * height
        self.shown = False
        self.closed = False

    def show(self):
        self.shown = True

    def close(self):
        self.closed = True

    def set_line(self, row, text):
        self.lines[row] = text


@pytest.fixture
def surfaces():
    return []


@pytest.fixture
def factory(surfaces):
    def create(config):
        surface = FakeSurface(config.height)
        surfaces.append(surface)
        return surface

    return create


@pytest.fixture
def session(factory):
    return KeycastSession(Config(width=20, height=3, compress_after=3), surface_factory=factory)


class TestActivation:
    def test_starts_inactive(self, session, surfaces):
        assert not session.active
        assert session.queue is None
        assert surfaces == []

    def test_toggle_creates_and_clears_overlay(self, session, surfaces):
        assert session.toggle() is True
        assert session.active
        assert surfaces[0].shown
        assert surfaces[0].lines == ["", "", ""]

        assert session.toggle() is False
        assert not session.active
        assert surfaces[0].closed

    def test_reactivation_starts_with_empty_queue(self, session, surfaces):
        session.activate()
        session.on_key_event("abc")
        session.deactivate()
        session.activate()

        assert len(session.queue) == 0
        assert session.render() == ""
        assert len(surfaces) == 2

    def test_activate_while_active_resets(self, session, surfaces):
        session.activate()
        session.on_key_event("abc")
        session.activate()
        assert len(session.queue) == 0
        assert surfaces[0].closed

    def test_deactivate_when_inactive_is_noop(self, session):
        session.deactivate()
        assert not session.active

    def test_factory_failure_leaves_session_inactive(self):
        cause = RuntimeError("no display")
        session = KeycastSession(Config(), surface_factory=MagicMock(side_effect=cause))

        with pytest.raises(OverlayError) as exc_info:
            session.toggle()

        assert exc_info.value.__cause__ is cause
        assert not session.active
        assert session.on_key_event("a") is None

    def test_show_failure_closes_surface(self):
        surface = MagicMock()
        surface.show.side_effect = RuntimeError("cannot map window")
        session = KeycastSession(Config(), surface_factory=lambda config: surface)

        with pytest.raises(OverlayError):
            session.activate()

        surface.close.assert_called_once()
        assert not session.active

    def test_blank_row_failure_closes_surface(self):
        surface = MagicMock()
        surface.set_line.side_effect = RuntimeError("window destroyed")
        session = KeycastSession(Config(), surface_factory=lambda config: surface)

        with pytest.raises(OverlayError) as excinfo:
            session.activate()

        assert isinstance(excinfo.value.__cause__, RuntimeError)
        surface.show.assert_called_once()
        surface.close.assert_called_once()
        assert not session.active
        assert session.on_key_event("a") is None

    def test_headless_session(self):
        """Without a surface factory the session still renders."""
        session = KeycastSession(Config(width=20))
        session.activate()
        assert session.on_key_event("ab").text == center("a b", 20)


class TestKeyEvents:
    def test_ignored_while_inactive(self, session):
        assert session.on_key_event("a") is None
        assert session.render() == ""

    def test_empty_input_ignored(self, session):
        session.activate()
        assert session.on_key_event("") is None
        assert len(session.queue) == 0

    def test_pointer_events_dropped(self, session):
        session.activate()
        assert session.on_key_event("<LeftMouse>", kind=EventKind.POINTER) is None
        assert session.on_key_event("x", kind=EventKind.POINTER) is None
        assert len(session.queue) == 0

    def test_line_written_to_middle_row(self, session, surfaces):
        session.activate()
        line = session.on_key_event("jk")

        assert line.row == 1
        assert line.text == center("j k", 20)
        assert surfaces[0].lines == ["", center("j k", 20), ""]

    def test_pipeline_end_to_end(self, session):
        session.activate()
        session.on_key_event("<C-a>")
        session.on_key_event("<TAB>x")
        session.on_key_event("<LeftMouse>")
        assert session.render() == "Ctrl+a ⇥ x"

    def test_repeats_are_compressed(self, session):
        session.activate()
        for _ in range(5):
            session.on_key_event("j")
        assert session.render() == "j..x5"

    def test_render_twice_is_stable(self, session):
        session.activate()
        session.on_key_event("the quick brown fox")
        assert session.render() == session.render()

    def test_width_budget_respected(self, session):
        session.activate()
        for char in "abcdefghijklmnopqrstuvwxyz":
            line = session.on_key_event(char)
            assert len(line.text.strip()) <= 18
        assert session.render() == "r s t u v w x y z"

    def test_dangling_bracket_dropped_by_default(self, session):
        session.activate()
        session.on_key_event("a<Tab")
        assert session.render() == "a"

    def test_dangling_bracket_kept_when_configured(self):
        session = KeycastSession(Config(keep_partial_keys=True))
        session.activate()
        session.on_key_event("a<Tab")
        # the partial token is not a known key and translates to nothing
        assert session.render() == "a"
        session.on_key_event("<")
        assert session.render() == "a <"

    def test_arrow_keys_with_filter_disabled(self):
        session = KeycastSession(Config(legacy_mouse_filter=False))
        session.activate()
        session.on_key_event("<Left><Right>")
        assert session.render() == "← →"

    def test_symbol_overrides_apply(self):
        session = KeycastSession(Config(symbols={"cr": "RET"}))
        session.activate()
        session.on_key_event("<CR>")
        assert session.render() == "RET"


class TestReconfigure:
    def test_reconfigure_active_session(self, session, surfaces):
        session.activate()
        session.on_key_event("abc")
        session.reconfigure(Config(width=30, height=5))

        assert session.active
        assert session.config.width == 30
        assert len(session.queue) == 0
        assert surfaces[0].closed
        assert surfaces[1].lines == [""] * 5
        assert session.on_key_event("a").row == 2

    def test_reconfigure_inactive_session(self, session, surfaces):
        session.reconfigure(Config(compress_after=2))
        assert not session.active
        assert surfaces == []
        session.activate()
        session.on_key_event("jj")
        assert session.render() == "j..x2"


class TestConcurrency:
    def test_events_from_many_threads_are_serialized(self):
        session = KeycastSession(Config(width=100, compress_after=3))
        session.activate()

        def feed():
            for _ in range(200):
                session.on_key_event("x")

        threads = [threading.Thread(target=feed) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(session.queue) == 800
        assert session.render() == "x..x800"
