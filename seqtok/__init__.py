"""seqtok: bidirectional symbol tokenizer with padded batches and one-hot.

Maps the symbols of a finite alphabet (DNA bases, amino acids, any
hashable value) to dense 0-based indices and back, pads variable-length
batches with the unknown index, and converts index batches to and from
channel-first one-hot ``torch`` tensors.
"""

from __future__ import annotations

from .config import PRESETS, TokenizerConfig
from .constants import INDEX_DTYPE, PRESET_ALPHABETS
from .errors import AmbiguousOneHot, ConstructionError, IndexOutOfRange, SeqTokError
from .lookup import DenseLookup, HashLookup, Lookup, build_lookup
from .onehot import onecold_batch, onecold_indices, onehot_batch
from .tokenizer import SequenceTokenizer
from .validation import ValidationReport, validate_tokenizer

__all__ = [
    "AmbiguousOneHot",
    "ConstructionError",
    "DenseLookup",
    "HashLookup",
    "INDEX_DTYPE",
    "IndexOutOfRange",
    "Lookup",
    "PRESETS",
    "PRESET_ALPHABETS",
    "SeqTokError",
    "SequenceTokenizer",
    "TokenizerConfig",
    "ValidationReport",
    "build_lookup",
    "onecold_batch",
    "onecold_indices",
    "onehot_batch",
    "validate_tokenizer",
]

__version__ = "0.1.0"
