"""Call mutations from SAM alignments against a FASTA reference by voting."""

from __future__ import annotations

import argparse
import math
import sys
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

DATA_DIR = Path("../data")

_COMPLEMENT = str.maketrans("ATGC", "TACG")


@dataclass
class SamRecord:
    """The fields of a mapped SAM alignment that the caller uses."""

    qname: str
    flag: int
    rname: str
    pos: int
    cigar: str
    seq: str


@dataclass
class PositionVotes:
    """Votes collected at one reference position."""

    none: int = 0
    deleted: int = 0
    inserted: int = 0
    substituted: int = 0
    substitution_bases: list[str] = field(default_factory=list)
    insertion_bases: list[str] = field(default_factory=list)


def reverse_complement(seq: str) -> str:
    """Return the reverse complement; bases other than A, C, G, T are kept."""
    return seq[::-1].translate(_COMPLEMENT)


def read_fasta(path: str | Path) -> str:
    """Read a FASTA file and return its sequence lines joined together."""
    with open(path, encoding="utf-8") as handle:
        return "".join(
            line
            for line in (raw.rstrip("\r\n") for raw in handle)
            if line and not line.startswith(">")
        )


def parse_sam_line(line: str) -> SamRecord | None:
    """Parse a SAM alignment line; return None if it is short or unmapped."""
    fields = line.split("\t")
    if fields[-1] == "":
        fields.pop()
    if len(fields) < 11:
        return None
    flag = int(fields[1])
    if flag & 4:
        return None
    return SamRecord(
        qname=fields[0],
        flag=flag,
        rname=fields[2],
        pos=int(fields[3]),
        cigar=fields[5],
        seq=fields[9],
    )


def read_sam(path: str | Path) -> list[SamRecord]:
    """Read the mapped alignments of a SAM file, skipping header lines."""
    with open(path, encoding="utf-8") as handle:
        records = []
        for raw in handle:
            line = raw.rstrip("\r\n")
            if line.startswith("@"):
                continue
            record = parse_sam_line(line)
            if record is not None:
                records.append(record)
        return records


def parse_cigar(cigar: str) -> Iterator[tuple[int, str]]:
    """Yield (length, operation) pairs; a trailing number without operation is dropped."""
    length = 0
    for char in cigar:
        if char.isdigit():
            length = length * 10 + int(char)
        else:
            yield length, char
            length = 0


def _trace(trace: TextIO | None, ref_pos, ref_base, read_pos, read_base, tag):
    if trace is not None:
        trace.write(
            f"refpos {ref_pos} - REF_BASE {ref_base} | readpos {read_pos} "
            f"- READ_BASE {read_base} [{tag}]\n"
        )


def collect_votes(
    records: Iterable[SamRecord], reference: str, trace: TextIO | None = None
) -> dict[int, PositionVotes]:
    """Walk each alignment's CIGAR and tally votes per 0-based reference position.

    If ``trace`` is given, a line is written to it for every compared base.
    """
    votes: dict[int, PositionVotes] = {}

    def at(pos: int) -> PositionVotes:
        return votes.setdefault(pos, PositionVotes())

    def in_reference(pos: int) -> bool:
        return 0 <= pos < len(reference)

    for record in records:
        ref_pos = record.pos - 1
        read_pos = 0
        seq = record.seq
        for length, op in parse_cigar(record.cigar):
            if op == "M":
                for _ in range(length):
                    if not in_reference(ref_pos) or read_pos >= len(seq):
                        break
                    ref_base = reference[ref_pos]
                    read_base = seq[read_pos]
                    if ref_base == read_base:
                        _trace(trace, ref_pos, ref_base, read_pos + 1, read_base, "MATCH")
                        at(ref_pos).none += 1
                    else:
                        _trace(trace, ref_pos, ref_base, read_pos + 1, read_base, "MISS")
                        entry = at(ref_pos)
                        entry.substituted += 1
                        entry.substitution_bases.append(read_base)
                    ref_pos += 1
                    read_pos += 1
            elif op == "I":
                ref_base = reference[ref_pos] if in_reference(ref_pos) else ""
                for offset in range(length):
                    if read_pos + offset >= len(seq):
                        break
                    read_base = seq[read_pos + offset]
                    _trace(
                        trace, ref_pos, ref_base, read_pos + offset + 1, read_base, "INSERT"
                    )
                    entry = at(ref_pos)
                    entry.insertion_bases.append(read_base)
                    entry.inserted += 1
                read_pos += length
            elif op == "D":
                for _ in range(length):
                    if not in_reference(ref_pos) or read_pos >= len(seq):
                        break
                    _trace(
                        trace, ref_pos, reference[ref_pos], read_pos + 1, seq[read_pos], "DELETE"
                    )
                    at(ref_pos).deleted += 1
                    ref_pos += 1
            elif op == "S":
                read_pos += length
    return votes


def _most_frequent(bases: Iterable[str]) -> str:
    """Return the base that first reaches the highest count."""
    counts: dict[str, int] = {}
    best = ""
    best_count = 0
    for base in bases:
        counts[base] = counts.get(base, 0) + 1
        if counts[base] > best_count:
            best_count = counts[base]
            best = base
    return best


def decide(votes: PositionVotes) -> tuple[str, str]:
    """Return the (type, base) call for one position; type "none" means no mutation.

    A kind of vote wins when it is at least as common as every other kind,
    has more than two votes and holds at least 40% of all votes at the position.
    """
    counts = {
        "none": votes.none,
        "X": votes.substituted,
        "I": votes.inserted,
        "D": votes.deleted,
    }
    threshold = math.ceil(0.4 * sum(counts.values()))

    def wins(kind: str) -> bool:
        count = counts[kind]
        return count >= max(counts.values()) and count > 2 and count >= threshold

    if wins("none"):
        return "none", "-"
    if wins("X"):
        return "X", _most_frequent(votes.substitution_bases)
    if wins("I"):
        return "I", _most_frequent(votes.insertion_bases)
    if wins("D"):
        return "D", "-"
    return "none", "-"


def _bases(bases: list[str]) -> str:
    return "[" + "".join(f"{base}," for base in bases) + "]" if bases else ""


def format_votes(votes: dict[int, PositionVotes]) -> str:
    """Render the collected votes as a human-readable report, by position."""
    parts = ["\n--- Votes per position in the reference genome ---\n"]
    for pos in sorted(votes):
        v = votes[pos]
        parts.append(
            f"Position: {pos}\n"
            f"  - Matches (none): {v.none}\n"
            f"  - Substitutions: {v.substituted} {_bases(v.substitution_bases)}\n"
            f"  - Deletions (deleted): {v.deleted}\n"
            f"  - Insertions (inserted): {v.inserted} {_bases(v.insertion_bases)}\n\n"
        )
    return "".join(parts)


def _calls_from_votes(votes: dict[int, PositionVotes]) -> dict[int, tuple[str, str]]:
    calls = {}
    for pos in sorted(votes):
        kind, base = decide(votes[pos])
        if kind != "none":
            calls[pos] = (kind, base)
    return calls


def call_mutations(
    records: Iterable[SamRecord], reference: str, trace: TextIO | None = None
) -> dict[int, tuple[str, str]]:
    """Return the called mutations as position -> (type, base), ordered by position."""
    return _calls_from_votes(collect_votes(records, reference, trace))


def write_mutations(calls: dict[int, tuple[str, str]], path: str | Path) -> None:
    """Write calls as ``type,position,base`` lines, ordered by position."""
    with open(path, "w", encoding="utf-8") as out:
        for pos in sorted(calls):
            kind, base = calls[pos]
            if kind != "none":
                out.write(f"{kind},{pos},{base}\n")


def main(argv: list[str] | None = None) -> int:
    """Call mutations from the data directory's FASTA and SAM files."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR)
    args = parser.parse_args(argv)
    data_dir: Path = args.data_dir

    start = time.perf_counter()

    try:
        reference = read_fasta(data_dir / "lambda.fasta")
    except OSError:
        print("Error opening FASTA file.")
        reference = ""
    print(f"FASTA length: {len(reference)} characters")

    try:
        records = read_sam(data_dir / "lambda.sam")
    except OSError:
        print("Error opening SAM file.")
        records = []
    print(f"\nTotal SAM records read: {len(records)}")
    for r in records:
        print(
            f"QNAME: {r.qname} | FLAG: {r.flag} | RNAME: {r.rname} | POS: {r.pos} "
            f"| CIGAR: {r.cigar} | SEQ: {r.seq}"
        )

    try:
        with open(data_dir / "matching.txt", "w", encoding="utf-8") as trace:
            votes = collect_votes(records, reference, trace)
        (data_dir / "voting.txt").write_text(format_votes(votes), encoding="utf-8")
        write_mutations(_calls_from_votes(votes), data_dir / "lambda_mutations1.csv")
    except OSError as exc:
        print(f"Error writing output: {exc}", file=sys.stderr)
        return 1

    print(f"Elapsed time: {time.perf_counter() - start} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())