"""PySide6 overlay window showing the key line.

A frameless, always-on-top box of ``width`` x ``height`` character cells in
the bottom-right corner of the primary screen. It never takes focus, so the
keys being shown keep going to the application being recorded.
"""

import platform

from PySide6.QtCore import QPoint, Qt
from PySide6.QtGui import QFont, QFontMetrics
from PySide6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget

from . import log
from .config import Config
from .renderer import blank_rows

logger = log.get_logger()

_system = platform.system()

SCREEN_MARGIN = 40
CONTENT_PADDING = 10
BORDER_WIDTH = 1


class KeycastOverlay(QWidget):
    """Fixed-size grid of text rows drawn on top of every other window."""

    def __init__(self, config: Config):
        super().__init__()
        self._drag_pos: QPoint | None = None
        self._columns = config.width
        self._rows = blank_rows(config.height)
        self._font_color = config.font_color
        self._background_color = config.background_color
        self._font = QFont(config.font_family, config.font_size)
        self._font.setStyleHint(QFont.StyleHint.Monospace)
        self._setup_window()
        self._setup_ui()
        self._resize_to_grid()
        self._move_to_corner()

    def _setup_window(self):
        flags = (
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool  # Hides from taskbar
        )
        if _system == "Linux":
            flags |= Qt.WindowType.X11BypassWindowManagerHint
        else:
            flags |= Qt.WindowType.WindowDoesNotAcceptFocus

        self.setWindowFlags(flags)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        self.setObjectName("keycast")
        self.setStyleSheet(
            f"#keycast {{ background-color: {self._background_color}; "
            f"border: {BORDER_WIDTH}px solid {self._font_color}; }}"
        )

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(CONTENT_PADDING, CONTENT_PADDING, CONTENT_PADDING, CONTENT_PADDING)

        self._label = QLabel(self._text())
        self._label.setFont(self._font)
        self._label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        self._label.setTextFormat(Qt.TextFormat.PlainText)
        self._label.setStyleSheet(f"color: {self._font_color}; background: transparent; border: none;")
        layout.addWidget(self._label)

    def _text(self) -> str:
        return "\n".join(self._rows)

    def _resize_to_grid(self):
        metrics = QFontMetrics(self._font)
        extra = 2 * (CONTENT_PADDING + BORDER_WIDTH)
        self.setFixedSize(
            metrics.horizontalAdvance("M") * self._columns + extra,
            metrics.lineSpacing() * len(self._rows) + extra,
        )

    def _move_to_corner(self):
        """Anchor the bottom-right corner near the bottom-right of the screen."""
        screen = QApplication.primaryScreen().availableGeometry()
        x = screen.x() + screen.width() - self.width() - SCREEN_MARGIN
        y = screen.y() + screen.height() - self.height() - SCREEN_MARGIN
        self.move(x, y)

    def set_line(self, row: int, text: str):
        """Replace one row of the content area."""
        if not 0 <= row < len(self._rows):
            logger.warning("overlay row out of range", row=row, rows=len(self._rows))
            return
        self._rows[row] = text
        self._label.setText(self._text())

    # Dragging support
    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            if _system == "Linux" and self.windowHandle() is not None:
                self.windowHandle().startSystemMove()
            else:
                self._drag_pos = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event):
        if event.buttons() == Qt.MouseButton.LeftButton and self._drag_pos:
            self.move(event.globalPosition().toPoint() - self._drag_pos)
            event.accept()

    def mouseReleaseEvent(self, event):
        if self._drag_pos is not None:
            self._drag_pos = None
            event.accept()


def create_overlay(config: Config) -> KeycastOverlay:
    """Surface factory for KeycastSession."""
    if QApplication.instance() is None:
        raise RuntimeError("no QApplication running")
    if QApplication.primaryScreen() is None:
        raise RuntimeError("no screen available")
    return KeycastOverlay(config)
