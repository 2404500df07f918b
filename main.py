#!/usr/bin/env python3
"""
AssetKit - Main Entry Point

Imports and inspects the assets below the assets directory.
"""

from assetkit.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
