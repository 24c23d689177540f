"""Tests for dense and hashed lookup strategies."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest
import torch

from seqtok.constants import EMPTY_SLOT
from seqtok.lookup import (
    DenseLookup,
    HashLookup,
    build_index_map,
    build_lookup,
    symbol_ordinal,
)

NACGT = ("N", "A", "C", "G", "T")


class TestSymbolOrdinal:
    def test_single_character(self) -> None:
        assert symbol_ordinal("A") == 65

    def test_non_negative_int(self) -> None:
        assert symbol_ordinal(7) == 7

    @pytest.mark.parametrize("symbol", ["AB", "", -1, True, 1.5, None, ("A",)])
    def test_no_ordinal(self, symbol: object) -> None:
        assert symbol_ordinal(symbol) is None


class TestStrategySelection:
    def test_ascii_is_dense(self) -> None:
        assert isinstance(build_lookup(NACGT, 0), DenseLookup)

    def test_small_ints_are_dense(self) -> None:
        assert isinstance(build_lookup((0, 10, 20), 0), DenseLookup)

    def test_words_are_hashed(self) -> None:
        assert isinstance(build_lookup(("<unk>", "the", "cat"), 0), HashLookup)

    def test_large_codepoint_is_hashed(self) -> None:
        assert isinstance(build_lookup(("?", "€"), 0), HashLookup)

    def test_mixed_kinds_are_hashed(self) -> None:
        # 'A' and 65 share an ordinal
        assert isinstance(build_lookup(("A", 65), 0), HashLookup)

    def test_dense_limit_respected(self) -> None:
        assert isinstance(build_lookup(NACGT, 0, dense_limit=65), HashLookup)
        assert isinstance(build_lookup(NACGT, 0, dense_limit=85), DenseLookup)
        assert isinstance(build_lookup(NACGT, 0, dense_limit=0), HashLookup)

    def test_table_sized_to_largest_ordinal(self) -> None:
        lookup = build_lookup(NACGT, 0)
        assert isinstance(lookup, DenseLookup)
        assert lookup.table.numel() == ord("T") + 1
        assert lookup.table.dtype == torch.long
        assert lookup.table[ord("B")] == EMPTY_SLOT


class TestIndexMap:
    def test_positions(self) -> None:
        assert build_index_map(NACGT) == {"N": 0, "A": 1, "C": 2, "G": 3, "T": 4}

    def test_last_duplicate_wins(self) -> None:
        assert build_index_map(("N", "A", "C", "A")) == {"N": 0, "A": 3, "C": 2}


@pytest.mark.parametrize("dense_limit", [256, 0], ids=["dense", "hash"])
class TestSharedContract:
    def test_hits(self, dense_limit: int) -> None:
        lookup = build_lookup(NACGT, 0, dense_limit)
        assert [lookup.get(s) for s in "NACGT"] == [0, 1, 2, 3, 4]

    def test_misses(self, dense_limit: int) -> None:
        lookup = build_lookup(NACGT, 0, dense_limit)
        for symbol in ["B", "Z", "€", "AC", "", 65, None, ["A"]]:
            assert lookup.get(symbol) == 0

    def test_get_many_string(self, dense_limit: int) -> None:
        lookup = build_lookup(NACGT, 0, dense_limit)
        assert lookup.get_many("GATZ") == [3, 1, 4, 0]

    def test_get_tensor(self, dense_limit: int) -> None:
        lookup = build_lookup(NACGT, 0, dense_limit)
        out = lookup.get_tensor("CAT€")
        assert out.dtype == torch.long
        assert out.tolist() == [2, 1, 4, 0]

    def test_get_tensor_empty(self, dense_limit: int) -> None:
        lookup = build_lookup(NACGT, 0, dense_limit)
        assert lookup.get_tensor("").numel() == 0
        assert lookup.get_tensor([]).numel() == 0

    def test_len_counts_distinct_symbols(self, dense_limit: int) -> None:
        assert len(build_lookup(NACGT, 0, dense_limit)) == 5
        assert len(build_lookup(("N", "A", "A"), 0, dense_limit)) == 2

    def test_unkidx_not_at_zero(self, dense_limit: int) -> None:
        lookup = build_lookup(("A", "N", "C"), 1, dense_limit)
        assert lookup.get("Z") == 1
        assert lookup.get_many("AZC") == [0, 1, 2]


class TestDenseIntSymbols:
    def test_strings_do_not_hit_int_table(self) -> None:
        lookup = build_lookup((0, 65), 0)
        assert isinstance(lookup, DenseLookup)
        assert lookup.get(65) == 1
        assert lookup.get("A") == 0
        assert lookup.get(True) == 0

    def test_int_sequence(self) -> None:
        lookup = build_lookup((0, 1, 2, 3), 0)
        assert lookup.get_many([3, 2, 9, 1]) == [3, 2, 0, 1]


@pytest.mark.parametrize("dense_limit", [256, 0], ids=["dense", "hash"])
class TestIntSymbolEquality:
    """Numbers equal to an int symbol resolve like a dict key lookup."""

    def test_equal_numbers_hit(self, dense_limit: int) -> None:
        lookup = build_lookup((0, 1, 2, 3), 0, dense_limit)
        assert lookup.get(2.0) == 2
        assert lookup.get(True) == 1
        assert lookup.get(False) == 0
        assert lookup.get(Fraction(6, 2)) == 3
        assert lookup.get(Decimal("2")) == 2
        assert lookup.get(complex(1, 0)) == 1

    @pytest.mark.parametrize(
        "symbol", [2.5, -1, -2.0, "2", float("nan"), float("inf"), complex(2, 1)]
    )
    def test_unequal_numbers_miss(self, dense_limit: int, symbol: object) -> None:
        lookup = build_lookup((9, 1, 2, 3), 0, dense_limit)
        assert lookup.get(symbol) == 0

    def test_get_many_mixed(self, dense_limit: int) -> None:
        lookup = build_lookup((0, 1, 2, 3), 0, dense_limit)
        assert lookup.get_many([3.0, 2, True, 7, 1.5]) == [3, 2, 1, 0, 0]
