#!/usr/bin/env python3
"""dnvm entry point"""

import sys

try:
    import aiohttp  # noqa
    import aiofiles  # noqa
    import pydantic  # noqa
    import semver  # noqa
except ImportError as e:
    print(f"Critical import failed: {e}")
    print("Please run: pip install -e .")
    sys.exit(1)

from dnvm.cli import run

if __name__ == "__main__":
    run()
