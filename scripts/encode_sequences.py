"""Encode a file of sequences into a padded index grid (and optionally one-hot).

Reads one sequence per line, builds a tokenizer from a YAML config or a
preset, and saves the encoded batch with ``torch.save``.

Usage:
    python -m scripts.encode_sequences reads.txt -o reads.pt --preset dna
    python -m scripts.encode_sequences reads.txt -o reads.pt \
        --config configs/dna.yaml --onehot

Output (a dict saved with torch.save):
  indices  : (max_len, batch_size) torch.long grid, padded with the unknown index
  lengths  : (batch_size,) original sequence lengths
  onehot   : (alphabet_size, max_len, batch_size) tensor, with --onehot
  alphabet : the effective alphabet, unknown symbol included
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import torch
from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from seqtok.config import TokenizerConfig
from seqtok.validation import validate_tokenizer

_log = logging.getLogger("seqtok.encode")


def read_sequences(path: Path, uppercase: bool = False) -> list[str]:
    """Read non-empty lines from *path*, stripped of surrounding whitespace."""
    sequences: list[str] = []
    with path.open(encoding="utf-8") as f:
        for line in tqdm(f, desc="Reading", unit=" lines"):
            seq = line.strip()
            if not seq:
                continue
            sequences.append(seq.upper() if uppercase else seq)
    return sequences


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Encode sequences into a padded index grid"
    )
    parser.add_argument("input", type=str, help="Text file, one sequence per line")
    parser.add_argument(
        "--output", "-o", type=str, required=True,
        help="Where to write the torch.save payload",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--config", "-c", type=str, default=None,
        help="Tokenizer config YAML",
    )
    source.add_argument(
        "--preset", type=str, default=None,
        help="Built-in alphabet preset (dna, rna, protein)",
    )
    parser.add_argument(
        "--onehot", action="store_true",
        help="Also store the one-hot tensor",
    )
    parser.add_argument(
        "--uppercase", action="store_true",
        help="Uppercase sequences before encoding",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log at DEBUG level",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input not found at {input_path}")
        sys.exit(1)

    if args.config:
        config = TokenizerConfig.from_yaml(args.config)
    else:
        try:
            config = TokenizerConfig.from_preset(args.preset)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            sys.exit(1)

    tokenizer = config.build()
    _log.info("Tokenizer: %r", tokenizer)

    sequences = read_sequences(input_path, uppercase=args.uppercase)
    if not sequences:
        print(f"Error: No sequences in {input_path}")
        sys.exit(1)

    indices, lengths = tokenizer.encode_batch(sequences, return_lengths=True)
    _log.info(
        "Encoded %d sequences into a %s grid", len(sequences), tuple(indices.shape)
    )

    payload: dict[str, object] = {
        "indices": indices,
        "lengths": lengths,
        "alphabet": list(tokenizer.alphabet),
        "unksym": tokenizer.unksym,
    }
    if args.onehot:
        onehot = config.onehot(tokenizer, indices)
        # Decode back under the configured policy before anything is written
        if config.onecold(tokenizer, onehot) != tokenizer.decode_nested(indices):
            _log.error("One-hot tensor does not decode back to the index grid")
            sys.exit(1)
        _log.debug(
            "One-hot %s verified under %r policy",
            tuple(onehot.shape), config.onecold_policy,
        )
        payload["onehot"] = onehot

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    torch.save(payload, output_path)
    _log.info("Saved %s", output_path)

    report = validate_tokenizer(tokenizer, sequences)
    print()
    print(report.summary())


if __name__ == "__main__":
    main()
