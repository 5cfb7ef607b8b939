"""Mini README: Persistence for the ledger snapshot.

Exposes the slot store and the reversible codecs it runs snapshots through.
"""

from .codec import Base64TextCodec, CodecError, LedgerCodec
from .store import LedgerStore

__all__ = ["Base64TextCodec", "CodecError", "LedgerCodec", "LedgerStore"]
