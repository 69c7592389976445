#!/usr/bin/env python3
"""
Bank Ledger Entry Point

Starts the interactive bank account console.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from bank_ledger.cli import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
