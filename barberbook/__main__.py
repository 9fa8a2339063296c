"""
Convenience entry point for running barberbook directly.

Usage: python -m barberbook [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
