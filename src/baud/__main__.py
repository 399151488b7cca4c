"""
baud CLI entry point.

Usage:
    python -m baud bbs.example.com
    python -m baud bbs.example.com 2323
"""

from baud.cli import main

if __name__ == "__main__":
    main()
