"""
Entry point for running the cmakekit CLI as a module.

Usage: python -m cmakekit [command] [options]
"""

from cmakekit.cli.parser import main

if __name__ == "__main__":
    main()
