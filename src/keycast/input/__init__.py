"""Platform-agnostic keyboard input.

Uses the X11 RECORD extension on Linux and pynput on macOS/Windows. Listeners
call back with key notation strings from a background thread.
"""

import platform

_system = platform.system()

if _system == "Linux":
    from .linux import KeyboardListener
elif _system in ("Darwin", "Windows"):
    from .pynput_backend import KeyboardListener
else:
    raise RuntimeError(f"Unsupported platform: {_system}")

__all__ = ["KeyboardListener"]
