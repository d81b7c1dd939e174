#!/usr/bin/env python3
"""PeakRush — entry point.

Run with:
    python main.py --phase 30 --sets 8
    python -m peakrush
"""

from peakrush.__main__ import main


if __name__ == "__main__":
    main()
