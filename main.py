#!/usr/bin/env python3
"""
Main entry point for the mpv marker tool.

This file serves as the main entry point for the application.
The actual implementation lives in the mpvmarkers package.
"""

import sys

from mpvmarkers.cli import main

if __name__ == "__main__":
    sys.exit(main())
