#!/usr/bin/env python3
"""
Entry point for acsetup

Usage: python -m acsetup
"""

import sys

from acsetup.frontends.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
