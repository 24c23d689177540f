"""One-hot bridge between encoded batches and channel-first tensors.

Layout follows the grid produced by
:meth:`SequenceTokenizer.encode_batch`, with the channel dimension in
front::

    indices (batch,)              ->  one-hot (alphabet, batch)
    indices (max_len, batch)      ->  one-hot (alphabet, max_len, batch)

Construction delegates to :func:`torch.nn.functional.one_hot`; decoding
picks a channel per position and resolves it through the tokenizer's
alphabet, so it returns symbols rather than indices.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import torch
import torch.nn.functional as F

from .constants import DEFAULT_ONECOLD_POLICY, INDEX_DTYPE, ONECOLD_POLICIES
from .errors import AmbiguousOneHot, IndexOutOfRange
from .tokenizer import SequenceTokenizer


def _as_index_tensor(batch: torch.Tensor | Sequence[Any]) -> torch.Tensor:
    if not isinstance(batch, torch.Tensor):
        batch = torch.as_tensor(batch)
    if batch.is_floating_point() or batch.is_complex() or batch.dtype == torch.bool:
        raise TypeError(f"Expected an integer index tensor, got dtype {batch.dtype}")
    return batch.to(INDEX_DTYPE)


def onehot_batch(
    tokenizer: SequenceTokenizer,
    batch: torch.Tensor | Sequence[Any],
    *,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    """One-hot encode a vector or grid of indices from *tokenizer*.

    Raises
    ------
    IndexOutOfRange
        If any index is outside ``[0, len(tokenizer) - 1]``.  Indices are
        never remapped to the unknown symbol here.
    TypeError
        If *batch* is not integer-typed.
    ValueError
        If *batch* is not 1-D or 2-D.
    """
    indices = _as_index_tensor(batch)
    if indices.dim() not in (1, 2):
        raise ValueError(
            f"Expected a 1-D or 2-D index batch, got shape {tuple(indices.shape)}"
        )

    n_channels = len(tokenizer)
    if indices.numel():
        bad = (indices < 0) | (indices >= n_channels)
        if bad.any():
            first = int(indices[bad][0])
            raise IndexOutOfRange(first, n_channels)

    # one_hot appends the channel dim; move it to the front
    return F.one_hot(indices, num_classes=n_channels).movedim(-1, 0).to(dtype)


def onecold_indices(
    tokenizer: SequenceTokenizer,
    onehot: torch.Tensor,
    *,
    policy: str = DEFAULT_ONECOLD_POLICY,
) -> torch.Tensor:
    """Select one channel per position and return the index tensor.

    ``policy="strict"`` requires exactly one non-zero channel at every
    position and raises :class:`AmbiguousOneHot` otherwise.  The index is
    that non-zero channel, so any active value (negative included) is
    honoured.
    ``policy="argmax"`` takes the largest channel, the lowest one on
    ties, so scores or probabilities decode as well.
    """
    if policy not in ONECOLD_POLICIES:
        raise ValueError(
            f"policy must be one of {ONECOLD_POLICIES}, got {policy!r}"
        )
    if onehot.dim() not in (2, 3):
        raise ValueError(
            f"Expected a 2-D or 3-D one-hot tensor, got shape {tuple(onehot.shape)}"
        )
    if onehot.shape[0] != len(tokenizer):
        raise ValueError(
            f"One-hot has {onehot.shape[0]} channels but the tokenizer "
            f"alphabet has {len(tokenizer)} symbols"
        )

    if onehot.dtype == torch.bool:
        onehot = onehot.to(INDEX_DTYPE)

    if policy == "strict":
        mask = (onehot != 0).to(INDEX_DTYPE)
        active = mask.sum(dim=0)
        bad = active != 1
        if bad.any():
            position = tuple(int(i) for i in bad.nonzero()[0])
            raise AmbiguousOneHot(position, int(active[position]))
        # The active channel, whatever its value or sign
        return mask.argmax(dim=0)

    return onehot.argmax(dim=0).to(INDEX_DTYPE)


def onecold_batch(
    tokenizer: SequenceTokenizer,
    onehot: torch.Tensor,
    *,
    policy: str = DEFAULT_ONECOLD_POLICY,
) -> list[Any]:
    """Decode a one-hot tensor to symbols.

    A ``(alphabet, batch)`` tensor gives a list of ``batch`` symbols; a
    ``(alphabet, max_len, batch)`` tensor gives ``max_len`` rows of
    ``batch`` symbols, the same layout as the index grid it came from.
    """
    return tokenizer.decode_nested(onecold_indices(tokenizer, onehot, policy=policy))
