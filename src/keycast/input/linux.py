"""Linux keyboard input using the X11 RECORD extension.

Works on X11 and on Wayland through XWayland without special permissions.
"""

import threading
from collections.abc import Callable

from Xlib import XK, X, display
from Xlib.ext import record
from Xlib.protocol import rq

from .. import log
from .keynames import SPECIAL_KEYS, key_notation

logger = log.get_logger()


def _build_keysym_names() -> dict[int, str]:
    """Map keysyms to X11 names ("Return", "Prior", "F5").

    Several names can share a keysym (F11 is also L1); names keycast knows
    win over the others.
    """
    names: dict[int, str] = {}
    for attr, value in vars(XK).items():
        if not attr.startswith("XK_"):
            continue
        name = attr[3:]
        if value not in names or name.lower() in SPECIAL_KEYS:
            names[value] = name
    return names


_KEYSYM_NAMES = _build_keysym_names()


class KeyboardListener:
    """Global keyboard listener reporting key notation strings."""

    def __init__(self, on_key: Callable[[str], None]):
        """Initialize the keyboard listener.

        Args:
            on_key: Called from the listener thread with the notation of each
                key press (e.g. 'a', '<CR>', '<C-a>').
        """
        self._on_key = on_key
        self._running = False
        self._thread: threading.Thread | None = None
        self._record_display: display.Display | None = None
        self._local_display: display.Display | None = None
        self._context: int | None = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start listening for keyboard events in a background thread."""
        if self._running:
            return

        self._running = True
        logger.debug("keyboard listener starting", backend="xlib")

        try:
            self._thread = threading.Thread(target=self._listen_loop, daemon=True)
            self._thread.start()
        except Exception as e:
            self._running = False
            logger.warning("keyboard capture unavailable", err=str(e))

    def _listen_loop(self) -> None:
        try:
            # RECORD needs its own connection besides the one used for lookups
            self._record_display = display.Display()
            self._local_display = display.Display()

            if not self._record_display.has_extension("RECORD"):
                logger.warning("x11 record extension not available")
                return

            self._context = self._record_display.record_create_context(
                0,
                [record.AllClients],
                [
                    {
                        "core_requests": (0, 0),
                        "core_replies": (0, 0),
                        "ext_requests": (0, 0, 0, 0),
                        "ext_replies": (0, 0, 0, 0),
                        "delivered_events": (0, 0),
                        "device_events": (X.KeyPress, X.KeyRelease),
                        "errors": (0, 0),
                        "client_started": False,
                        "client_died": False,
                    }
                ],
            )

            # Blocks until record_disable_context is called from stop()
            self._record_display.record_enable_context(self._context, self._handle_event)
            self._record_display.record_free_context(self._context)

        except Exception as e:
            if self._running:
                logger.error("keyboard listener error", err=str(e))
        finally:
            self._cleanup()

    def _handle_event(self, reply) -> None:
        if reply.category != record.FromServer:
            return
        if reply.client_swapped:
            return
        if not len(reply.data) or reply.data[0] < 2:
            return

        data = reply.data
        while len(data):
            event, data = rq.EventField(None).parse_binary_value(data, self._record_display.display, None, None)
            if event.type != X.KeyPress:
                continue

            shift = bool(event.state & X.ShiftMask)
            keysym = self._local_display.keycode_to_keysym(event.detail, 1 if shift else 0)
            notation = self._keysym_to_notation(
                keysym,
                ctrl=bool(event.state & X.ControlMask),
                shift=shift,
                alt=bool(event.state & X.Mod1Mask),
            )
            if notation is None:
                continue
            try:
                self._on_key(notation)
            except Exception as e:
                logger.error("on_key callback error", err=str(e), key=notation)

    @staticmethod
    def _keysym_to_notation(keysym: int, ctrl: bool, shift: bool, alt: bool) -> str | None:
        # Latin-1 keysyms are the character code itself
        if 0x20 <= keysym <= 0xFF:
            return key_notation(chr(keysym), ctrl=ctrl, shift=shift, alt=alt)

        keysym_name = _KEYSYM_NAMES.get(keysym)
        if not keysym_name:
            return None
        return key_notation(keysym_name, ctrl=ctrl, shift=shift, alt=alt)

    def stop(self) -> None:
        """Stop listening for keyboard events."""
        self._running = False

        if self._context and self._local_display:
            try:
                self._local_display.record_disable_context(self._context)
                self._local_display.flush()
            except Exception as e:
                logger.debug("record context already gone", err=str(e))

        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _cleanup(self) -> None:
        for name in ("_record_display", "_local_display"):
            conn = getattr(self, name)
            if conn is None:
                continue
            try:
                conn.close()
            except Exception as e:
                logger.debug("x11 display close failed", err=str(e))
            setattr(self, name, None)
        self._context = None
