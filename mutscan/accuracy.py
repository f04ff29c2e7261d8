"""Score predicted mutation calls against a reference set of mutations."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

DATA_DIR = Path("../data")

SCORE_POSITION = 1
SCORE_TYPE = 1
SCORE_VALUE = 1


@dataclass(frozen=True)
class Mutation:
    """A single mutation: type ("X", "I" or "D"), position and new value."""

    type: str
    position: int
    new_value: str


def parse_line(line: str) -> Mutation:
    """Parse a ``type,position,value`` CSV line into a Mutation."""
    fields = line.split(",")
    fields += [""] * (3 - len(fields))
    kind, position, value = fields[:3]
    try:
        pos = int(position)
    except ValueError:
        raise ValueError(f"invalid mutation position in line: {line!r}") from None
    return Mutation(kind, pos, value)


def load_mutations(path: str | Path) -> list[Mutation]:
    """Load mutations from a CSV file, skipping its header line."""
    with open(path, encoding="utf-8") as handle:
        lines = (line.rstrip("\r\n") for line in handle)
        next(lines, None)
        return [parse_line(line) for line in lines]


def index_by_position(mutations: Iterable[Mutation]) -> dict[int, tuple[str, str]]:
    """Map each position to its (type, new value); later entries win."""
    return {m.position: (m.type, m.new_value) for m in mutations}


def evaluate(predicted: Iterable[Mutation], reference: Iterable[Mutation]) -> float:
    """Return the percentage of points the predictions earn against the reference.

    Each reference mutation is worth a point for a prediction at its position,
    another if the type also matches, and a third if the new value matches too.
    """
    by_position = index_by_position(predicted)
    total = 0
    earned = 0
    for ref in reference:
        total += SCORE_POSITION + SCORE_TYPE + SCORE_VALUE
        found = by_position.get(ref.position)
        if found is None:
            continue
        kind, value = found
        earned += SCORE_POSITION
        if kind == ref.type:
            earned += SCORE_TYPE
            if value == ref.new_value:
                earned += SCORE_VALUE
    return earned * 100.0 / total if total > 0 else 0.0


def _load_or_empty(path: Path) -> list[Mutation]:
    try:
        return load_mutations(path)
    except OSError:
        print(f"Error: cannot open file {path}", file=sys.stderr)
        return []


def main(argv: list[str] | None = None) -> int:
    """Print the accuracy of predicted mutations against reference mutations."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--predicted", type=Path, default=DATA_DIR / "mutations.csv")
    parser.add_argument(
        "--reference", type=Path, default=DATA_DIR / "lambda_mutated.csv"
    )
    args = parser.parse_args(argv)

    predicted = _load_or_empty(args.predicted)
    reference = _load_or_empty(args.reference)
    accuracy = evaluate(predicted, reference)
    print(f"Mutation detection accuracy: {accuracy:.6f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())