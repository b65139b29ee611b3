"""PySide6 application wiring keyboard input to the keycast session."""

import os
import platform
import signal
import sys

# On Linux, force Qt to use X11/XWayland instead of native Wayland.
# Native Wayland compositors don't honour WindowStaysOnTopHint or arbitrary
# window positions. Must be set before importing Qt.
if platform.system() == "Linux" and "QT_QPA_PLATFORM" not in os.environ:
    os.environ["QT_QPA_PLATFORM"] = "xcb"

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QApplication

from . import log
from .config import Config
from .input import KeyboardListener
from .overlay import create_overlay
from .session import KeycastSession, OverlayError

logger = log.get_logger()

# Wake the Qt loop periodically so Python can run the SIGINT handler.
SIGNAL_POLL_MS = 200


class KeyBridge(QObject):
    """Moves key notation from the listener thread onto the Qt thread."""

    key_pressed = Signal(str)


class KeycastApp:
    """Main application."""

    def __init__(self, config: Config):
        self._config = config
        self._app: QApplication | None = None
        self._bridge: KeyBridge | None = None
        self._listener: KeyboardListener | None = None
        self._session: KeycastSession | None = None
        self._signal_timer: QTimer | None = None

    def setup(self):
        self._app = QApplication(sys.argv)
        self._app.setApplicationName("keycast")
        # Hiding the overlay must not end the program
        self._app.setQuitOnLastWindowClosed(False)
        self._app.aboutToQuit.connect(self._on_quit)

        self._session = KeycastSession(self._config, surface_factory=create_overlay)

        self._bridge = KeyBridge()
        self._bridge.key_pressed.connect(self._on_key)
        self._listener = KeyboardListener(on_key=self._bridge.key_pressed.emit)

        signal.signal(signal.SIGINT, lambda *_: self._app.quit())
        self._signal_timer = QTimer()
        self._signal_timer.timeout.connect(lambda: None)
        self._signal_timer.start(SIGNAL_POLL_MS)

    def _on_key(self, notation: str):
        """Handle a key press on the Qt thread."""
        if notation.upper() == self._config.toggle_key.upper():
            self._toggle()
            return
        self._session.on_key_event(notation)

    def _toggle(self):
        try:
            active = self._session.toggle()
        except OverlayError as e:
            logger.error("could not show overlay", err=str(e))
            return
        logger.info("overlay toggled", active=active)

    def _on_quit(self):
        if self._listener:
            self._listener.stop()
        if self._session:
            self._session.deactivate()

    def run(self) -> int:
        """Run the application.

        Returns:
            Exit code.
        """
        self._listener.start()
        logger.info("listening for keys", toggle_key=self._config.toggle_key)
        if self._config.start_active:
            try:
                self._session.activate()
            except OverlayError as e:
                logger.error("could not show overlay", err=str(e))
                return 1
        return self._app.exec()
