"""SequenceTokenizer: alphabet-to-index mapping with batch padding.

Indices are 0-based.  The unknown symbol is always part of the effective
alphabet: when it is not supplied it is prepended at index 0.  Encoding
is lenient (any symbol not in the alphabet resolves to the unknown
index) while decoding is strict (an invalid index raises
:class:`~seqtok.errors.IndexOutOfRange`).

Usage::

    tok = SequenceTokenizer("ACGT", "N")
    tok.encode_sequence("GATTACA")        # [3, 1, 4, 4, 1, 2, 1]
    grid = tok.encode_batch(["AC", "GTA"])
    grid.shape                            # torch.Size([3, 2])
    tok.decode_batch(grid)                # [['A', 'C', 'N'], ['G', 'T', 'A']]
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Hashable, Iterable, Iterator, Sequence
from typing import Any, Generic, Literal, TypeVar, overload

import torch

from .constants import (
    DEFAULT_DENSE_LIMIT,
    DEFAULT_DUPLICATE_POLICY,
    DUPLICATE_POLICIES,
    INDEX_DTYPE,
)
from .errors import ConstructionError, IndexOutOfRange
from .lookup import Lookup, build_lookup

T = TypeVar("T", bound=Hashable)

_log = logging.getLogger("seqtok.tokenizer")


def find_duplicates(alphabet: Iterable[Hashable]) -> list[Hashable]:
    """Return symbols occurring more than once, in first-repeat order."""
    seen: set[Hashable] = set()
    dupes: list[Hashable] = []
    for symbol in alphabet:
        if symbol in seen and symbol not in dupes:
            dupes.append(symbol)
        seen.add(symbol)
    return dupes


class SequenceTokenizer(Generic[T]):
    """Immutable bidirectional mapping between symbols and indices.

    Parameters
    ----------
    alphabet
        Ordered symbols to recognise.  A ``str`` is taken as its
        characters.
    unksym
        Symbol standing in for anything outside the alphabet.  Also the
        padding value of :meth:`encode_batch`.
    on_duplicate
        ``"last_wins"`` keeps every entry in the alphabet but lets the
        last occurrence of a repeated symbol own its lookup entry, so
        ``encode`` only reaches that position.  ``"reject"`` raises
        :class:`ConstructionError` instead.
    dense_limit
        Ordinal bound under which a dense lookup table is used.

    Raises
    ------
    ConstructionError
        If *alphabet* is empty, or holds duplicates under ``"reject"``.
    ValueError
        If *on_duplicate* is not a known policy.
    """

    __slots__ = ("_alphabet", "_lookup", "_unksym", "_unkidx")

    def __init__(
        self,
        alphabet: Iterable[T],
        unksym: T,
        *,
        on_duplicate: str = DEFAULT_DUPLICATE_POLICY,
        dense_limit: int = DEFAULT_DENSE_LIMIT,
    ) -> None:
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(
                f"on_duplicate must be one of {DUPLICATE_POLICIES}, "
                f"got {on_duplicate!r}"
            )

        symbols: tuple[T, ...] = tuple(alphabet)
        if not symbols:
            raise ConstructionError(
                "Alphabet is empty: a tokenizer needs at least one symbol "
                "besides the unknown symbol"
            )

        dupes = find_duplicates(symbols)
        if dupes:
            if on_duplicate == "reject":
                raise ConstructionError(
                    f"Alphabet contains duplicate symbols: {dupes!r}"
                )
            _log.warning(
                "Duplicate symbols %r in alphabet; the last occurrence of "
                "each owns its lookup entry", dupes,
            )

        if unksym in symbols:
            unkidx = symbols.index(unksym)
            prepended = False
        else:
            symbols = (unksym, *symbols)
            unkidx = 0
            prepended = True

        self._alphabet = symbols
        self._unksym = unksym
        self._unkidx = unkidx
        self._lookup: Lookup = build_lookup(symbols, unkidx, dense_limit)

        _log.debug(
            "Built tokenizer: %d symbols, unknown %r at %d (%s), %s lookup",
            len(symbols), unksym, unkidx,
            "prepended" if prepended else "supplied", self._lookup.strategy,
        )

    # ── Read-only state ────────────────────────────────────────────

    @property
    def alphabet(self) -> tuple[T, ...]:
        """Effective alphabet, unknown symbol included."""
        return self._alphabet

    @property
    def unksym(self) -> T:
        return self._unksym

    @property
    def unkidx(self) -> int:
        return self._unkidx

    @property
    def lookup(self) -> Lookup:
        return self._lookup

    @property
    def lookup_strategy(self) -> str:
        """``"dense"`` or ``"hash"``."""
        return self._lookup.strategy

    # ── Framework integration ──────────────────────────────────────

    def parameters(self) -> Iterator[torch.nn.Parameter]:
        """Yield nothing: the tokenizer owns no trainable parameters."""
        return iter(())

    @property
    def num_trainable_parameters(self) -> int:
        return 0

    # ── Encode ─────────────────────────────────────────────────────

    def encode_scalar(self, token: object) -> int:
        """Index of *token*, or :attr:`unkidx` when it is unknown."""
        return self._lookup.get(token)

    def encode_sequence(self, sequence: Iterable[object]) -> list[int]:
        """Encode element-wise, preserving order and length."""
        return self._lookup.get_many(sequence)

    def encode_nested(self, nested: Any) -> Any:
        """Encode nested lists of symbols, keeping the nesting.

        Lists and tuples holding other lists or tuples are recursed into;
        anything else (a flat list, a string) is encoded as one sequence.
        """
        if isinstance(nested, (list, tuple)) and any(
            isinstance(item, (list, tuple)) for item in nested
        ):
            return [self.encode_nested(item) for item in nested]
        return self.encode_sequence(nested)

    @overload
    def encode_batch(
        self,
        batch: Sequence[Iterable[object]],
        *,
        return_lengths: Literal[False] = ...,
    ) -> torch.Tensor: ...
    @overload
    def encode_batch(
        self,
        batch: Sequence[Iterable[object]],
        *,
        return_lengths: Literal[True],
    ) -> tuple[torch.Tensor, torch.Tensor]: ...

    def encode_batch(
        self,
        batch: Sequence[Iterable[object]],
        *,
        return_lengths: bool = False,
    ) -> torch.Tensor | tuple[torch.Tensor, torch.Tensor]:
        """Encode sequences into a ``(max_len, batch_size)`` grid.

        Column ``j`` holds sequence ``j``; positions past its end are
        padded with :attr:`unkidx`, which makes padding identical to an
        unknown symbol.  Pass ``return_lengths=True`` to also get the
        original lengths when the two must be told apart.

        An empty batch gives a ``(0, 0)`` grid.
        """
        columns = [self._lookup.get_tensor(seq) for seq in batch]
        lengths = torch.tensor([len(col) for col in columns], dtype=INDEX_DTYPE)
        max_len = int(lengths.max()) if columns else 0

        grid = torch.full(
            (max_len, len(columns)), self._unkidx, dtype=INDEX_DTYPE
        )
        for j, col in enumerate(columns):
            grid[: len(col), j] = col

        if return_lengths:
            return grid, lengths
        return grid

    # ── Decode ─────────────────────────────────────────────────────

    def decode_scalar(self, idx: int) -> T:
        """Symbol at *idx*.

        Raises
        ------
        IndexOutOfRange
            If *idx* is not an integer in ``[0, len(self) - 1]``.
            Negative indices are not wrapped.
        """
        size = len(self._alphabet)
        if isinstance(idx, bool):
            raise IndexOutOfRange(idx, size)
        try:
            position = operator.index(idx)
        except TypeError:
            raise IndexOutOfRange(idx, size) from None
        if not 0 <= position < size:
            raise IndexOutOfRange(idx, size)
        return self._alphabet[position]

    def decode_sequence(self, indices: Iterable[int] | torch.Tensor) -> list[T]:
        """Decode element-wise, preserving order and length."""
        if isinstance(indices, torch.Tensor):
            indices = indices.tolist()
        return [self.decode_scalar(i) for i in indices]

    def decode_nested(self, nested: Any) -> Any:
        """Decode nested lists or a tensor of any rank, keeping its shape."""
        if isinstance(nested, torch.Tensor):
            nested = nested.tolist()
        if isinstance(nested, (list, tuple)):
            return [self.decode_nested(item) for item in nested]
        return self.decode_scalar(nested)

    def decode_batch(
        self, grid: torch.Tensor | Sequence[Sequence[int]]
    ) -> list[list[T]]:
        """Decode a ``(max_len, batch_size)`` grid into one list per column.

        Padding is kept: every returned list has ``max_len`` symbols.
        """
        if not isinstance(grid, torch.Tensor):
            grid = torch.as_tensor(grid)
        if grid.dim() != 2:
            raise ValueError(
                f"Expected a 2-D (max_len, batch_size) grid, got shape "
                f"{tuple(grid.shape)}"
            )
        return [self.decode_sequence(grid[:, j]) for j in range(grid.shape[1])]

    # ── Dunder protocol ────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._alphabet)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._alphabet

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceTokenizer):
            return NotImplemented
        return (
            self._alphabet == other._alphabet
            and self._unksym == other._unksym
            and self._unkidx == other._unkidx
        )

    def __hash__(self) -> int:
        return hash((self._alphabet, self._unksym, self._unkidx))

    def __repr__(self) -> str:
        return (
            f"SequenceTokenizer[{type(self._unksym).__name__}]"
            f"(alphabet_size={len(self)}, unknown={self._unksym!r})"
        )
