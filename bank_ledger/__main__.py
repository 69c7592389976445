"""Main entry point for the bank ledger console"""

import sys

from bank_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main())
