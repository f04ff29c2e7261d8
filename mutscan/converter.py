"""Convert VCF variant records into a simple mutation CSV."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

DATA_DIR = Path("../data")
HEADER = "Position,Type,REF,ALT"


def mutation_type(ref: str, alt: str) -> str:
    """Classify a variant: "X" substitution, "I" insertion, "D" deletion.

    Only the first of several comma-separated ALT alleles is considered.
    """
    first_alt = alt.split(",", 1)[0]
    if len(ref) < len(first_alt):
        return "I"
    if len(ref) > len(first_alt):
        return "D"
    return "X"


def convert_vcf(lines: Iterable[str]) -> Iterator[str]:
    """Yield the CSV header and then one CSV row per VCF data line."""
    yield HEADER
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line or line.startswith("#"):
            continue
        columns = line.split("\t")
        if columns[-1] == "":
            columns.pop()
        if len(columns) < 5:
            continue
        position, ref, alt = columns[1], columns[3], columns[4]
        yield f"{position},{mutation_type(ref, alt)},{ref},{alt}"


def main(argv: list[str] | None = None) -> int:
    """Convert a VCF file into the mutation CSV format."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", type=Path, default=DATA_DIR / "freebayes.vcf")
    parser.add_argument(
        "--output", type=Path, default=DATA_DIR / "freebayes_mutations.csv"
    )
    args = parser.parse_args(argv)
    try:
        with open(args.input, encoding="utf-8") as vcf, open(
            args.output, "w", encoding="utf-8"
        ) as out:
            for row in convert_vcf(vcf):
                out.write(row + "\n")
    except OSError:
        print("Error opening files!", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())