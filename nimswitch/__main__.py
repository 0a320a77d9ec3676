"""
Entry point for running the nimswitch CLI as a module.

Usage: python -m nimswitch [TOKEN] [options]
"""

from nimswitch.cli.parser import main

if __name__ == "__main__":
    main()
