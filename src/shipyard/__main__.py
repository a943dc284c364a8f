"""Allow ``python -m shipyard``."""

from shipyard.cli.app import app

if __name__ == "__main__":
    app()
