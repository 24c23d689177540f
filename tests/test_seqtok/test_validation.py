"""Tests for tokenizer diagnostics."""

from __future__ import annotations

from seqtok.tokenizer import SequenceTokenizer
from seqtok.validation import (
    ValidationReport,
    check_roundtrip,
    check_unknown_rate,
    validate_tokenizer,
)


class TestChecks:
    def test_roundtrip_with_unknowns(self) -> None:
        tok = SequenceTokenizer("ACGT", "N")
        ok, failures = check_roundtrip(tok, ["GATTACA", "ACGZ", ""])
        assert ok is True
        assert failures == []

    def test_roundtrip_with_duplicates(self) -> None:
        tok = SequenceTokenizer(["A", "C", "A"], "N")
        ok, _ = check_roundtrip(tok, ["ACCA"])
        assert ok is True

    def test_unknown_rate(self) -> None:
        tok = SequenceTokenizer("ACGT", "N")
        n_symbols, n_unknown, unknown = check_unknown_rate(tok, ["ACGTN", "ACGZ"])
        assert n_symbols == 9
        assert n_unknown == 2
        assert unknown == {"N": 1, "Z": 1}


class TestValidateTokenizer:
    def test_report_without_samples(self) -> None:
        report = validate_tokenizer(SequenceTokenizer("ACGT", "N"))
        assert report.alphabet_size == 5
        assert report.unkidx == 0
        assert report.lookup_strategy == "dense"
        assert report.duplicates == []
        assert report.n_symbols == 0
        assert report.unknown_rate == 0.0

    def test_report_with_samples(self) -> None:
        tok = SequenceTokenizer("ACGT", "N")
        report = validate_tokenizer(tok, ["ACGTN", "ACGZ", "ZZ"])
        assert report.roundtrip_ok is True
        assert report.n_symbols == 11
        assert report.n_unknown == 4
        assert report.unknown_symbols == {"N": 1, "Z": 3}
        assert abs(report.unknown_rate - 4 / 11) < 1e-9

    def test_duplicates_reported(self) -> None:
        report = validate_tokenizer(SequenceTokenizer(["A", "C", "A"], "N"))
        assert report.duplicates == ["A"]

    def test_summary(self) -> None:
        tok = SequenceTokenizer(["the", "cat"], "<unk>")
        report = validate_tokenizer(tok, [["the", "dog"]])
        s = report.summary()
        assert isinstance(s, str)
        assert "Alphabet size: 3" in s
        assert "hash lookup" in s
        assert "'dog' x1" in s

    def test_empty_report_summary(self) -> None:
        assert "Unknown rate: 0.0000" in ValidationReport().summary()
