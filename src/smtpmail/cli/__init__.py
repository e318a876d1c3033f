"""Command line interface for smtpmail."""

from smtpmail.cli.app import app, main

__all__ = ["app", "main"]
