"""Exception hierarchy.

This submodule defines the errors raised while decoding, assembling, and
encoding compact macromolecular structures. All errors are fail-fast: none of
them is retried by the package, and none leaves a partially built structure
visible to the caller.

Exports:
    MMTFError: Base class for all package errors.
    CodecError: Malformed, truncated, or incompatible binary column.
    ProtocolError: Assembler call made out of the permitted order or state.
    ValidationError: Declared counts or cross-references do not reconcile.
"""

from __future__ import annotations

__all__: list[str] = [
    "CodecError",
    "MMTFError",
    "ProtocolError",
    "ValidationError",
]


class MMTFError(Exception):
    """Base class for all package errors."""


class CodecError(MMTFError, ValueError):
    """Error raised when a binary column cannot be decoded or encoded."""


class ProtocolError(MMTFError, RuntimeError):
    """Error raised when an assembler call arrives in the wrong state."""


class ValidationError(MMTFError, ValueError):
    """Error raised when a structure fails cross-reference validation.

    Attributes:
        subject (str): The offending entity (e.g. `"model 0"`).
        invariant (str): Short name of the broken invariant (e.g.
            `"chain-count"`).

    """

    def __init__(
        self,
        msg: str,
        *,
        subject: str = "",
        invariant: str = "",
    ) -> None:
        super().__init__(msg)
        self.subject: str = subject
        self.invariant: str = invariant
