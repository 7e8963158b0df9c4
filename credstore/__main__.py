"""Allow ``python -m credstore`` to start the server."""

import sys

from credstore.main import run

if __name__ == "__main__":
    sys.exit(run())
