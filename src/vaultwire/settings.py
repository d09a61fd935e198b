"""Codec configuration.

CodecSettings is immutable and may be shared freely between threads and
calls. Every encoder and decoder accepts ``settings=None``, which means
``CodecSettings.default()``.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from enum import Enum


class LoginPairing(Enum):
    """How the login-entries encoder pairs entry keys with credential keys.

    NESTED iterates each entry's own ``entries`` mapping. CROSS reproduces
    the legacy web client, which paired every top-level key with every
    other top-level key and wrote empty credentials where none existed.
    """

    NESTED = "nested"
    CROSS = "cross"

    @property
    def display_name(self) -> str:
        """Human-readable pairing name."""
        names = {
            LoginPairing.NESTED: "Nested (per-entry credentials)",
            LoginPairing.CROSS: "Cross (legacy top-level pairing)",
        }
        return names[self]


@dataclass(frozen=True, slots=True)
class CodecSettings:
    """Settings shared by all section codecs.

    Attributes:
        strict: Raise ValueOutOfRangeError instead of masking values that
            overflow their field
        login_pairing: Iteration contract for the login-entries encoder
        text_errors: Error handler passed to ``bytes.decode`` for UTF-8
            payloads (any name registered with the codecs module)
    """

    strict: bool = False
    login_pairing: LoginPairing = LoginPairing.NESTED
    text_errors: str = "replace"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not isinstance(self.login_pairing, LoginPairing):
            raise ValueError(f"Invalid login pairing: {self.login_pairing!r}")
        try:
            codecs.lookup_error(self.text_errors)
        except LookupError as e:
            raise ValueError(f"Unknown text error handler: {self.text_errors}") from e

    @classmethod
    def default(cls) -> CodecSettings:
        """Masking with warnings, nested login pairing."""
        return cls()

    @classmethod
    def hardened(cls) -> CodecSettings:
        """Reject any value that does not fit its field.

        Decoding also fails on invalid UTF-8 instead of substituting
        replacement characters.
        """
        return cls(strict=True, text_errors="strict")

    @classmethod
    def reference(cls) -> CodecSettings:
        """Byte-for-byte compatible with the legacy web client.

        Use this when output must match buffers produced by the legacy
        serializer, including its login pairing.
        """
        return cls(strict=False, login_pairing=LoginPairing.CROSS)
