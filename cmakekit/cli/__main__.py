"""
Entry point for running the cmakekit CLI as a module.

Usage: python -m cmakekit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
