"""
Entry point for running typingskit CLI as a module.

Usage: python -m typingskit [command] [options]
"""

from typingskit.cli.parser import main

if __name__ == "__main__":
    main()
