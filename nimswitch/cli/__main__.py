"""
Entry point for running the nimswitch CLI as a module.

Usage: python -m nimswitch.cli [TOKEN] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
