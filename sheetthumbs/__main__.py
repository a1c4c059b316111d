"""
Main entry point for running the package as a module.

Usage:
    python -m sheetthumbs build
    python -m sheetthumbs report --manifest images/vrbo/_manifest.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
