"""Allow running as: python -m space_compliance"""

import sys

from space_compliance.main import cli

if __name__ == "__main__":
    sys.exit(cli())
