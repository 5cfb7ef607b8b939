"""Mini README: Reversible text encodings for the persisted ledger slot.

Structure:
    * LedgerCodec - interface every slot encoding implements.
    * Base64TextCodec - UTF-8 + base64 obfuscation used by default.
    * CodecError - raised by ``decode`` for text the codec did not produce.

``Base64TextCodec`` only keeps the stored text from being casually readable.
It is NOT a cipher and gives no confidentiality. Deployments that need privacy
must supply a real authenticated cipher implementing ``LedgerCodec``; the
store does not care which codec it is handed.
"""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod


class CodecError(ValueError):
    """Stored text could not be decoded."""


class LedgerCodec(ABC):
    """Reversible transform between snapshot JSON text and stored text."""

    name: str = "generic"

    @abstractmethod
    def encode(self, text: str) -> str:
        """Turn JSON text into opaque storable text."""

    @abstractmethod
    def decode(self, opaque: str) -> str:
        """Invert ``encode``; raise ``CodecError`` on malformed input."""


class Base64TextCodec(LedgerCodec):
    """Base64 over the UTF-8 bytes of the document, matching existing ledger files."""

    name = "base64"

    def encode(self, text: str) -> str:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def decode(self, opaque: str) -> str:
        try:
            raw = base64.b64decode(opaque.strip(), validate=True)
            return raw.decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, AttributeError) as error:
            raise CodecError(f"Stored ledger text is not valid {self.name}: {error}") from error
