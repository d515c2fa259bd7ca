#!/usr/bin/env python3
"""Launch the eo output enhancer.

Usage:
    some-command | python run.py [--url URL] [--model NAME] [--debug] [--trace] [--verbose]
"""
import sys

from eo.main import main

if __name__ == "__main__":
    sys.exit(main())
