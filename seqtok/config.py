"""TokenizerConfig dataclass with YAML round-tripping and presets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import torch
import yaml

from .constants import (
    DEFAULT_DENSE_LIMIT,
    DEFAULT_DUPLICATE_POLICY,
    DEFAULT_ONECOLD_POLICY,
    DEFAULT_ONEHOT_DTYPE,
    DUPLICATE_POLICIES,
    ONECOLD_POLICIES,
    PRESET_ALPHABETS,
)
from .onehot import onecold_batch, onehot_batch
from .tokenizer import SequenceTokenizer


@dataclass
class TokenizerConfig:
    """Everything needed to build a tokenizer and drive the one-hot bridge.

    Validates policy names and limits in ``__post_init__`` so a bad YAML
    file fails on load rather than at the first encode.
    """

    # ── Alphabet ───────────────────────────────────────────────────
    alphabet: list[Any] = field(default_factory=list)
    unksym: Any = "N"

    # ── Lookup construction ────────────────────────────────────────
    on_duplicate: str = DEFAULT_DUPLICATE_POLICY
    dense_limit: int = DEFAULT_DENSE_LIMIT

    # ── One-hot bridge ─────────────────────────────────────────────
    onecold_policy: str = DEFAULT_ONECOLD_POLICY
    onehot_dtype: str = DEFAULT_ONEHOT_DTYPE

    def __post_init__(self) -> None:
        # "ACGT" in YAML is the same alphabet as [A, C, G, T]
        self.alphabet = list(self.alphabet)
        if self.on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(
                f"on_duplicate must be one of {DUPLICATE_POLICIES}, "
                f"got {self.on_duplicate!r}"
            )
        if self.onecold_policy not in ONECOLD_POLICIES:
            raise ValueError(
                f"onecold_policy must be one of {ONECOLD_POLICIES}, "
                f"got {self.onecold_policy!r}"
            )
        # 0 disables the dense table: every alphabet gets the hash lookup
        if self.dense_limit < 0:
            raise ValueError(
                f"dense_limit must be non-negative, got {self.dense_limit}"
            )
        if not isinstance(getattr(torch, self.onehot_dtype, None), torch.dtype):
            raise ValueError(
                f"onehot_dtype must name a torch dtype, got {self.onehot_dtype!r}"
            )

    @property
    def torch_onehot_dtype(self) -> torch.dtype:
        return getattr(torch, self.onehot_dtype)

    def build(self) -> SequenceTokenizer:
        """Construct the tokenizer this config describes."""
        return SequenceTokenizer(
            self.alphabet,
            self.unksym,
            on_duplicate=self.on_duplicate,
            dense_limit=self.dense_limit,
        )

    def onehot(
        self,
        tokenizer: SequenceTokenizer,
        batch: torch.Tensor | Sequence[Any],
    ) -> torch.Tensor:
        """One-hot encode *batch* in the configured ``onehot_dtype``."""
        return onehot_batch(tokenizer, batch, dtype=self.torch_onehot_dtype)

    def onecold(self, tokenizer: SequenceTokenizer, onehot: torch.Tensor) -> list[Any]:
        """Decode *onehot* to symbols under the configured ``onecold_policy``."""
        return onecold_batch(tokenizer, onehot, policy=self.onecold_policy)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "TokenizerConfig":
        if name not in PRESET_ALPHABETS:
            raise KeyError(
                f"Unknown preset {name!r}; available: {', '.join(sorted(PRESET_ALPHABETS))}"
            )
        alphabet, unksym = PRESET_ALPHABETS[name]
        return cls(alphabet=list(alphabet), unksym=unksym, **overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "TokenizerConfig":
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        preset = data.pop("preset", None)
        if preset is not None:
            return cls.from_preset(preset, **data)
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(asdict(self), f, default_flow_style=False, allow_unicode=True)


# Preset configurations
PRESETS: dict[str, TokenizerConfig] = {
    name: TokenizerConfig.from_preset(name) for name in PRESET_ALPHABETS
}
