"""macOS/Windows keyboard input using pynput."""

from collections.abc import Callable

from pynput import keyboard

from .. import log
from .keynames import Modifiers, key_notation

logger = log.get_logger()


def _key_name(key) -> str | None:
    """Character or key name pynput reports for a key."""
    if getattr(key, "char", None):
        return key.char
    name = getattr(key, "name", None)
    return name or None


class KeyboardListener:
    """Global keyboard listener reporting key notation strings."""

    def __init__(self, on_key: Callable[[str], None]):
        """Initialize the keyboard listener.

        Args:
            on_key: Called from the pynput thread with the notation of each
                key press (e.g. 'a', '<CR>', '<C-a>').
        """
        self._on_key = on_key
        self._listener: keyboard.Listener | None = None
        self._modifiers = Modifiers()

    @property
    def running(self) -> bool:
        return self._listener is not None

    def _handle_press(self, key) -> None:
        name = _key_name(key)
        if name is None or self._modifiers.update(name, pressed=True):
            return
        notation = key_notation(
            name,
            ctrl=self._modifiers.ctrl,
            shift=self._modifiers.shift,
            alt=self._modifiers.alt,
        )
        if notation is None:
            return
        try:
            self._on_key(notation)
        except Exception as e:
            logger.error("on_key callback error", err=str(e), key=notation)

    def _handle_release(self, key) -> None:
        name = _key_name(key)
        if name is not None:
            self._modifiers.update(name, pressed=False)

    def start(self) -> None:
        """Start listening for keyboard events in a background thread."""
        if self._listener is not None:
            return

        logger.debug("keyboard listener starting", backend="pynput")
        self._modifiers = Modifiers()
        self._listener = keyboard.Listener(on_press=self._handle_press, on_release=self._handle_release)
        self._listener.start()

    def stop(self) -> None:
        """Stop listening for keyboard events."""
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
