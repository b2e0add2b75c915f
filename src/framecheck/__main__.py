"""Allow ``python -m framecheck``."""

from framecheck.cli import app

if __name__ == "__main__":
    app()
