"""
Console launcher for passkeep.

Usage:
    python -m passkeep
    python -m passkeep --db ~/vaults/work.db --debug
"""

import sys
import asyncio
import argparse
import logging
from pathlib import Path

from .config import get_settings, save_settings
from .manager import ConsoleRenderer, PasswordManager

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="passkeep — local website/username/password manager"
    )
    parser.add_argument("--db", default=None, help="Path to the SQLite store (overrides settings)")
    parser.add_argument("--config", default=None, help="Path to settings.yaml")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--write-config", action="store_true",
                        help="Write the effective settings to the config file and exit")

    args = parser.parse_args()

    settings = get_settings(Path(args.config).expanduser() if args.config else None)
    if args.db:
        settings.db_path = str(Path(args.db).expanduser())

    # Logging
    level = logging.DEBUG if args.debug else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.write_config:
        save_settings(settings)
        sys.exit(0)

    manager = PasswordManager.from_settings(settings)
    renderer = ConsoleRenderer(manager)

    try:
        asyncio.run(renderer.run())
    except KeyboardInterrupt:
        print()
    sys.exit(0)


if __name__ == "__main__":
    main()
