"""Exception types raised by the tokenizer and the one-hot bridge.

Encoding never raises for unknown symbols; these cover construction
failures and misuse of the decode direction.
"""

from __future__ import annotations


class SeqTokError(Exception):
    """Base class for every seqtok error."""


class ConstructionError(SeqTokError, ValueError):
    """The alphabet cannot produce a usable tokenizer."""


class IndexOutOfRange(SeqTokError, IndexError):
    """An index falls outside ``[0, size - 1]`` for the tokenizer's alphabet."""

    def __init__(self, index: object, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(
            f"Index {index!r} is out of range for an alphabet of "
            f"{size} symbols (valid: 0..{size - 1})"
        )


class AmbiguousOneHot(SeqTokError, ValueError):
    """A one-hot position has zero or several active channels."""

    def __init__(self, position: tuple[int, ...], active: int) -> None:
        self.position = position
        self.active = active
        super().__init__(
            f"One-hot vector at position {position} has {active} active "
            f"channels, expected exactly 1"
        )
