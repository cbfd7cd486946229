"""Mini README: Session storage handed to the web interface.

The ledger store constructs one ``MemorySessionStore`` at start-up; the
web layer keeps login state in it keyed by a cookie value.
"""

from .memory_store import MemorySessionStore

__all__ = ["MemorySessionStore"]
