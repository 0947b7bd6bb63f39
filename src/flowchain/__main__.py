"""
Main entry point for the flowchain CLI.

This module is executed when running `python -m flowchain` or via the `flowchain` executable.
"""

from .cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
