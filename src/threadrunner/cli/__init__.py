"""
Command line interface for Threadrunner
"""

from threadrunner.cli.runner_cli import cli, main

__all__ = ["cli", "main"]
