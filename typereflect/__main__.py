"""
Entry point for running TypeReflect as a module.

Usage:
    python -m typereflect module:Type [options]
"""

import sys

from typereflect.cli import main

if __name__ == "__main__":
    sys.exit(main())
