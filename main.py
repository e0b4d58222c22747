#!/usr/bin/env python
"""CLI for the equipment intelligence pipeline."""

from equipment_intel.cli import main

if __name__ == "__main__":
    main()
