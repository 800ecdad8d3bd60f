"""
Command-line entry point for the dental clinician matcher.
"""

from .cli import app


def main() -> None:
    # Delegate to Typer app so `dentmatch ...` works once installed.
    app()
