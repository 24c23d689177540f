"""Symbol-to-index lookup with dense and hashed backing strategies.

Both strategies satisfy the same contract: ``get(symbol)`` returns the
symbol's index, or the unknown index for anything not in the table.
Neither ever raises on arbitrary input, and both match symbols the way
a dict does, so a number equal to an int symbol (``2.0``, ``True``)
finds it whichever strategy backs the table.

The dense strategy indexes a ``torch.long`` table by the symbol's
ordinal (``ord`` for single characters, the value itself for
non-negative ints).  It is picked when every symbol in the alphabet has
an ordinal below the dense limit, which covers ASCII/Latin-1 alphabets
such as DNA, RNA, and protein letters.  Everything else uses a dict.
"""

from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Sequence

import torch

from .constants import DEFAULT_DENSE_LIMIT, EMPTY_SLOT, INDEX_DTYPE


def symbol_ordinal(symbol: object) -> int | None:
    """Return the dense-table ordinal of *symbol*, or None if it has none."""
    if isinstance(symbol, str):
        return ord(symbol) if len(symbol) == 1 else None
    if isinstance(symbol, int) and not isinstance(symbol, bool):
        return symbol if symbol >= 0 else None
    return None


def _integral_ordinal(symbol: object) -> int | None:
    """Ordinal of a number equal to a non-negative int, as a dict would match it.

    ``2.0``, ``True`` and ``Fraction(4, 2)`` all compare and hash equal to
    an int key, so the dense table resolves them the same way.
    """
    if not isinstance(symbol, numbers.Number):
        return None
    value = symbol
    if isinstance(symbol, numbers.Complex) and not isinstance(symbol, numbers.Real):
        if symbol.imag != 0:
            return None
        value = symbol.real
    try:
        code = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
    if code < 0 or code != symbol:
        return None
    return code


class Lookup(ABC):
    """Maps symbols to indices, resolving misses to ``unkidx``."""

    strategy: str = ""

    def __init__(self, unkidx: int) -> None:
        self.unkidx = unkidx

    @abstractmethod
    def get(self, symbol: object) -> int:
        """Index of *symbol*, or ``unkidx`` when absent."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of distinct symbols the table resolves."""

    def get_many(self, symbols: Iterable[object]) -> list[int]:
        return [self.get(s) for s in symbols]

    def get_tensor(self, symbols: Iterable[object]) -> torch.Tensor:
        return torch.tensor(self.get_many(symbols), dtype=INDEX_DTYPE)


class HashLookup(Lookup):
    """Dict-backed lookup for arbitrary hashable symbols."""

    strategy = "hash"

    def __init__(self, table: dict[Hashable, int], unkidx: int) -> None:
        super().__init__(unkidx)
        self._table = table

    def get(self, symbol: object) -> int:
        try:
            return self._table.get(symbol, self.unkidx)  # type: ignore[arg-type]
        except TypeError:
            # Unhashable input cannot be in the table
            return self.unkidx

    def __len__(self) -> int:
        return len(self._table)


class DenseLookup(Lookup):
    """Ordinal-indexed lookup for small-range symbols.

    Slots hold the symbol's index or ``EMPTY_SLOT``.  Ordinals past the
    end of the table resolve to ``unkidx`` without touching it.
    """

    strategy = "dense"

    def __init__(self, table: torch.Tensor, unkidx: int, kind: type = str) -> None:
        super().__init__(unkidx)
        self._table = table
        self._kind = kind
        # Plain list for scalar access; the tensor serves vectorized strings.
        self._slots: list[int] = table.tolist()

    @property
    def table(self) -> torch.Tensor:
        return self._table

    def get(self, symbol: object) -> int:
        if self._kind is str:
            code = symbol_ordinal(symbol) if isinstance(symbol, str) else None
        else:
            code = _integral_ordinal(symbol)
        if code is None or code >= len(self._slots):
            return self.unkidx
        idx = self._slots[code]
        return self.unkidx if idx == EMPTY_SLOT else idx

    def get_many(self, symbols: Iterable[object]) -> list[int]:
        if isinstance(symbols, str) and self._kind is str:
            return self.get_tensor(symbols).tolist()
        return super().get_many(symbols)

    def get_tensor(self, symbols: Iterable[object]) -> torch.Tensor:
        if not isinstance(symbols, str) or self._kind is not str:
            return super().get_tensor(symbols)
        if not symbols:
            return torch.empty(0, dtype=INDEX_DTYPE)
        # UTF-32 gives one fixed-width code point per character.
        codes = torch.frombuffer(
            bytearray(symbols.encode("utf-32-le", "surrogatepass")), dtype=torch.int32
        ).to(INDEX_DTYPE)
        in_range = codes < self._table.numel()
        found = self._table[codes.clamp(max=self._table.numel() - 1)]
        return torch.where(in_range & (found != EMPTY_SLOT), found, self.unkidx)

    def __len__(self) -> int:
        return sum(1 for idx in self._slots if idx != EMPTY_SLOT)


def build_index_map(alphabet: Sequence[Hashable]) -> dict[Hashable, int]:
    """Map each symbol to its position; later duplicates overwrite earlier ones."""
    index_map: dict[Hashable, int] = {}
    for idx, symbol in enumerate(alphabet):
        index_map[symbol] = idx
    return index_map


def build_lookup(
    alphabet: Sequence[Hashable],
    unkidx: int,
    dense_limit: int = DEFAULT_DENSE_LIMIT,
) -> Lookup:
    """Build the lookup for *alphabet*, choosing the backing strategy.

    The dense table is sized to the largest ordinal in the alphabet, so
    its footprint is bounded by *dense_limit*.  Alphabets mixing
    characters and ints share ordinals and always get the hash lookup.
    """
    index_map = build_index_map(alphabet)

    kinds = {str if isinstance(symbol, str) else type(symbol) for symbol in index_map}
    ordinals = [symbol_ordinal(symbol) for symbol in index_map]
    dense_ok = (
        len(kinds) == 1
        and bool(ordinals)
        and all(o is not None and o < dense_limit for o in ordinals)
    )
    if dense_ok:
        codes: list[int] = [o for o in ordinals if o is not None]
        table = torch.full((max(codes) + 1,), EMPTY_SLOT, dtype=INDEX_DTYPE)
        for code, idx in zip(codes, index_map.values()):
            table[code] = idx
        return DenseLookup(table, unkidx, kind=kinds.pop())

    return HashLookup(index_map, unkidx)
