"""Command-line entry point for keycast.

This module is executed when running:
- python -m keycast
- keycast (via the pyproject.toml entry point)
"""

import argparse
import sys

from . import __version__, log
from .config import Config, ConfigError


def _parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="keycast",
        description="Show the keys you press in a small on-screen overlay",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config file (default: keycast.yml or ~/.keycast/config.yml)",
    )
    parser.add_argument("--width", type=int, default=None, help="Overlay width in columns")
    parser.add_argument("--height", type=int, default=None, help="Overlay height in rows")
    parser.add_argument(
        "--compress-after",
        type=int,
        default=None,
        help="Collapse a key repeated this many times into key..xN",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Load the config file and apply command-line overrides."""
    config = Config.load(args.config)
    overrides = {
        key: value
        for key, value in (
            ("width", args.width),
            ("height", args.height),
            ("compress_after", args.compress_after),
        )
        if value is not None
    }
    return config.override(overrides)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = _parse_arguments(argv)
    log.configure(debug=args.debug)
    logger = log.get_logger()
    logger.info(f"keycast v{__version__}")

    try:
        config = build_config(args)
    except ConfigError as e:
        logger.error("invalid configuration", err=str(e))
        return 2

    # Qt is only needed once there is something to show
    from .app import KeycastApp

    app = KeycastApp(config)
    app.setup()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
