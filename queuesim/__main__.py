"""Entry point for running the simulator.

Usage:
    python -m queuesim --arrival_rate 0.1
"""

import sys

from queuesim.cli import main

if __name__ == "__main__":
    sys.exit(main())
