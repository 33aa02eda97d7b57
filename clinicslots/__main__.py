"""
Entry point for ``python -m clinicslots``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
