"""
Module execution entry point.

Allows running with: python -m histree_cli
"""

import sys
from histree_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
