#!/usr/bin/env python3
"""Entry point for the GMP primitives command line tool."""

import sys

from gmp_primitives.cli import main

if __name__ == "__main__":
    sys.exit(main())
