"""Mini README: HTTP interface for spendlog.

Exports the FastAPI application factory that exposes the ledger store as a
small JSON API with cookie based sessions.
"""

from .web_app import create_application

__all__ = ["create_application"]
