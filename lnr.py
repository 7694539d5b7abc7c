#!/usr/bin/env python3
"""
Entry point script for the local npm repository manager CLI.
This allows running commands as: python lnr.py <command>
"""
import sys
from local_npm_repo.cli import main

if __name__ == '__main__':
    sys.exit(main())
