"""Keycast session: activation state, key pipeline and overlay output.

A session owns everything that lives while the overlay is visible: the display
queue and the overlay surface. Key events go through
parse -> translate -> append -> render under a single lock, so hosts that
deliver events from several threads are serialized.
"""

import threading
from collections.abc import Callable
from typing import Protocol

from . import log
from .config import Config
from .display_queue import DisplayQueue
from .notation import split_keys
from .renderer import RenderedLine, blank_rows, place
from .symbols import SymbolTable
from .translate import EventKind, Translator

logger = log.get_logger()


class OverlaySurface(Protocol):
    """What the session needs from an overlay window."""

    def show(self) -> None: ...

    def close(self) -> None: ...

    def set_line(self, row: int, text: str) -> None: ...


SurfaceFactory = Callable[[Config], OverlaySurface]


class OverlayError(RuntimeError):
    """Raised when the overlay surface cannot be created."""


class KeycastSession:
    """Turns raw key input into the line shown in the overlay."""

    def __init__(self, config: Config | None = None, surface_factory: SurfaceFactory | None = None):
        self._lock = threading.Lock()
        self._config = config or Config()
        self._surface_factory = surface_factory
        self._translator = self._make_translator(self._config)
        self._surface: OverlaySurface | None = None
        self._queue: DisplayQueue | None = None

    @staticmethod
    def _make_translator(config: Config) -> Translator:
        return Translator(
            SymbolTable(config.symbols),
            legacy_mouse_filter=config.legacy_mouse_filter,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def active(self) -> bool:
        return self._queue is not None

    @property
    def queue(self) -> DisplayQueue | None:
        return self._queue

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def toggle(self) -> bool:
        """Show the overlay if hidden, hide it if shown. Returns the new state."""
        with self._lock:
            if self._queue is not None:
                self._deactivate()
            else:
                self._activate()
            return self.active

    def activate(self) -> None:
        """Create the overlay and start with an empty queue.

        Raises:
            OverlayError: Creating or preparing the surface failed.
                The session stays inactive.
        """
        with self._lock:
            if self._queue is not None:
                self._deactivate()
            self._activate()

    def deactivate(self) -> None:
        with self._lock:
            self._deactivate()

    def _activate(self) -> None:
        surface = None
        if self._surface_factory is not None:
            try:
                surface = self._surface_factory(self._config)
                surface.show()
                for row, text in enumerate(blank_rows(self._config.height)):
                    surface.set_line(row, text)
            except Exception as e:
                logger.error("overlay creation failed", err=str(e))
                if surface is not None:
                    surface.close()
                raise OverlayError(f"failed to create overlay: {e}") from e

        self._surface = surface
        self._queue = DisplayQueue(self._config.width, self._config.compress_after)
        logger.info("session activated", width=self._config.width, height=self._config.height)

    def _deactivate(self) -> None:
        if self._queue is None:
            return
        surface, self._surface = self._surface, None
        self._queue = None
        if surface is not None:
            surface.close()
        logger.info("session deactivated")

    def reconfigure(self, config: Config) -> None:
        """Replace the configuration. An active session restarts with an empty queue."""
        with self._lock:
            was_active = self._queue is not None
            if was_active:
                self._deactivate()
            self._config = config
            self._translator = self._make_translator(config)
            if was_active:
                self._activate()

    # -------------------------------------------------------------------------
    # Key events
    # -------------------------------------------------------------------------

    def on_key_event(self, raw: str, kind: EventKind = EventKind.KEYBOARD) -> RenderedLine | None:
        """Feed one host input chunk through the pipeline.

        Returns the line written to the overlay, or None when the event was
        ignored (inactive session, empty input or pointer event).
        """
        with self._lock:
            if self._queue is None or not raw or kind is EventKind.POINTER:
                return None

            tokens = split_keys(raw, keep_partial=self._config.keep_partial_keys)
            symbols = self._translator.translate(tokens)
            logger.debug("key translated", raw=raw, symbols=symbols)
            self._queue.append(symbols)

            line = place(self._queue.render(), self._config.width, self._config.height)
            if self._surface is not None:
                self._surface.set_line(line.row, line.text)
            return line

    def render(self) -> str:
        """Current compressed line, or an empty string while inactive."""
        with self._lock:
            if self._queue is None:
                return ""
            return self._queue.render()
