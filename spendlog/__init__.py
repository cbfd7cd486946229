"""Mini README: Package initializer for the spendlog expense tracker.

Exposes the ledger store and logging factory so callers (the web
interface, the CLI launcher, tests) can import the primary entry points
without walking the package tree.
"""

from .ledger import LedgerStore
from .logging_utils import get_logger

__all__ = ["LedgerStore", "get_logger"]
