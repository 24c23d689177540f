"""Diagnostics for a tokenizer against sample sequences.

Checks roundtrip fidelity, unknown-symbol rate, and duplicate alphabet
entries, and gathers them into a :class:`ValidationReport`.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field

from .tokenizer import SequenceTokenizer, find_duplicates


@dataclass
class ValidationReport:
    """Tokenizer validation results."""

    alphabet_size: int = 0
    unksym: Hashable = None
    unkidx: int = 0
    lookup_strategy: str = ""

    # Duplicates
    duplicates: list[Hashable] = field(default_factory=list)

    # Roundtrip
    roundtrip_ok: bool = True
    roundtrip_failures: list[str] = field(default_factory=list)

    # Coverage
    n_symbols: int = 0
    n_unknown: int = 0
    unknown_symbols: dict[Hashable, int] = field(default_factory=dict)

    @property
    def unknown_rate(self) -> float:
        if self.n_symbols == 0:
            return 0.0
        return self.n_unknown / self.n_symbols

    def summary(self) -> str:
        lines = [
            f"Alphabet size: {self.alphabet_size} "
            f"(unknown={self.unksym!r} at {self.unkidx}, {self.lookup_strategy} lookup)",
            f"Duplicate symbols: {self.duplicates or 'none'}",
            f"Roundtrip fidelity: {self.roundtrip_ok} "
            f"({len(self.roundtrip_failures)} failures)",
            f"Unknown rate: {self.unknown_rate:.4f} "
            f"({self.n_unknown}/{self.n_symbols} symbols)",
        ]
        if self.unknown_symbols:
            top = sorted(self.unknown_symbols.items(), key=lambda kv: -kv[1])[:10]
            lines.append(
                "Most frequent unknowns: "
                + ", ".join(f"{sym!r} x{count}" for sym, count in top)
            )
        return "\n".join(lines)


# ── Individual check functions ─────────────────────────────────────


def check_roundtrip(
    tokenizer: SequenceTokenizer,
    samples: Iterable[Sequence[Hashable]],
) -> tuple[bool, list[str]]:
    """Verify ``decode(encode(s))`` matches *s* with unknowns as ``unksym``.

    Symbols outside the alphabet are expected to come back as the
    unknown symbol, so they are not counted as failures.
    """
    failures: list[str] = []
    for sample in samples:
        decoded = tokenizer.decode_sequence(tokenizer.encode_sequence(sample))
        expected = [s if s in tokenizer else tokenizer.unksym for s in sample]
        if decoded != expected:
            failures.append(f"MISMATCH: {sample[:60]!r} -> {decoded[:60]!r}")
    return len(failures) == 0, failures


def check_unknown_rate(
    tokenizer: SequenceTokenizer,
    samples: Iterable[Sequence[Hashable]],
) -> tuple[int, int, Counter[Hashable]]:
    """Count symbols, unknown symbols, and unknowns by value.

    An occurrence of the unknown symbol itself counts as unknown.
    """
    n_symbols = 0
    unknown: Counter[Hashable] = Counter()
    for sample in samples:
        for symbol, idx in zip(sample, tokenizer.encode_sequence(sample)):
            n_symbols += 1
            if idx == tokenizer.unkidx:
                unknown[symbol] += 1
    return n_symbols, sum(unknown.values()), unknown


# ── Orchestrator ───────────────────────────────────────────────────


def validate_tokenizer(
    tokenizer: SequenceTokenizer,
    samples: Sequence[Sequence[Hashable]] | None = None,
) -> ValidationReport:
    """Run the full validation suite on *tokenizer*.

    Parameters
    ----------
    tokenizer
        The tokenizer to check.
    samples
        Sequences to measure roundtrip fidelity and unknown rate on.

    Returns
    -------
    ValidationReport
    """
    report = ValidationReport(
        alphabet_size=len(tokenizer),
        unksym=tokenizer.unksym,
        unkidx=tokenizer.unkidx,
        lookup_strategy=tokenizer.lookup_strategy,
        duplicates=find_duplicates(tokenizer.alphabet),
    )

    if samples:
        report.roundtrip_ok, report.roundtrip_failures = check_roundtrip(
            tokenizer, samples
        )
        report.n_symbols, report.n_unknown, unknown = check_unknown_rate(
            tokenizer, samples
        )
        report.unknown_symbols = dict(unknown)

    return report
