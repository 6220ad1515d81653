"""Command Line Interface Package"""

from commitsplit.cli.main import main

__all__ = ["main"]
