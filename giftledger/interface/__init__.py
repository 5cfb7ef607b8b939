"""Mini README: Interactive interfaces for the gift ledger.

Exports the FastAPI application factory. The Typer CLI lives in the
repository root as ``main_ledger.py``.
"""

from .web_app import create_application

__all__ = ["create_application"]
