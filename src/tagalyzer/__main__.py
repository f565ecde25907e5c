"""
Main entry point for running tagalyzer as a module.
Allows: python -m tagalyzer ...
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
