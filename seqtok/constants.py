"""Central constants for lookup geometry, policies, and preset alphabets.

Every value that affects index layout, lookup strategy selection, or the
accepted policy names lives here so the other modules import from a
single source of truth.
"""

from __future__ import annotations

import torch

# ── Index layout ───────────────────────────────────────────────────
# Indices are 0-based: index i addresses alphabet[i].  torch.long is the
# dtype torch.nn.functional.one_hot requires, so grids are built in it
# directly instead of converting at the bridge.
INDEX_DTYPE: torch.dtype = torch.long

# ── Lookup strategy ────────────────────────────────────────────────
# Alphabets whose symbols all have an ordinal below this bound get a
# dense table (single-byte characters by default).  Anything larger
# falls back to a hash lookup.
DEFAULT_DENSE_LIMIT: int = 256

# Marks an unused slot in the dense table.
EMPTY_SLOT: int = -1

# ── Policies ───────────────────────────────────────────────────────
DUPLICATE_POLICIES: tuple[str, ...] = ("last_wins", "reject")
ONECOLD_POLICIES: tuple[str, ...] = ("strict", "argmax")

DEFAULT_DUPLICATE_POLICY: str = "last_wins"
DEFAULT_ONECOLD_POLICY: str = "strict"
DEFAULT_ONEHOT_DTYPE: str = "float32"

# ── Preset alphabets ───────────────────────────────────────────────
# (alphabet, unknown symbol) pairs for common biological sequences.
DNA_ALPHABET: str = "ACGT"
RNA_ALPHABET: str = "ACGU"
PROTEIN_ALPHABET: str = "ACDEFGHIKLMNPQRSTVWY"  # 20 canonical amino acids

PRESET_ALPHABETS: dict[str, tuple[str, str]] = {
    "dna": (DNA_ALPHABET, "N"),
    "rna": (RNA_ALPHABET, "N"),
    "protein": (PROTEIN_ALPHABET, "X"),
}
