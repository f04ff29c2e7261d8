# mutscan

A small toolkit for finding point mutations in a genome from read alignments.

It has three modules:

* **`mutscan.caller`** reads a reference genome from a FASTA file and aligned
  reads from a SAM file. It walks each read's CIGAR string (`M`, `I`, `D` and
  `S` operations) and records votes at every 0-based reference position: a
  match, a substitution, an insertion or a deletion. Each position is then
  decided by vote. A kind of vote wins when it is at least as common as every
  other kind, has more than two votes and holds at least 40 % of all votes at
  that position. Substitutions and insertions carry the most frequent read
  base; deletions carry `-`. Calls are written as CSV lines
  `type,position,base`, where the type is `X` (substitution), `I` (insertion)
  or `D` (deletion).
* **`mutscan.converter`** turns the data lines of a VCF file into CSV rows
  `Position,Type,REF,ALT`, with a header row first.
* **`mutscan.accuracy`** compares a predicted mutation list with a reference
  list, both as CSV files of `type,position,value` lines with a header line.
  For each reference mutation, a prediction at the same position earns one
  point, a matching type earns another, and a matching value as well earns a
  third. The result is the percentage of the points that could be earned
  (0.0 for an empty reference).

## Installation

```
pip install .
```

To also install the tools for running the tests:

```
pip install ".[test]"
```

The package uses only the Python standard library and needs Python 3.10 or
later.

## Command line

Installing the package adds three commands. By default they read and write
files in `../data`, relative to the current directory.

```
mutscan-call [--data-dir DIR]
```

Reads `lambda.fasta` and `lambda.sam` from the data directory, prints the
reference length and every SAM record read, and writes into the same directory:

* `matching.txt`: one line for every compared base, tagged `MATCH`, `MISS`,
  `INSERT` or `DELETE`;
* `voting.txt`: the votes collected at each position;
* `lambda_mutations1.csv`: the calls, ordered by position, with no header line.

```
mutscan-convert [--input VCF] [--output CSV]
```

Defaults to `freebayes.vcf` and `freebayes_mutations.csv` in the data
directory.

```
mutscan-accuracy [--predicted CSV] [--reference CSV]
```

Defaults to `mutations.csv` and `lambda_mutated.csv` in the data directory, and
prints `Mutation detection accuracy: <percent>%`. A file that cannot be opened
is reported and treated as empty.

## Python API

```python
from mutscan.caller import read_fasta, read_sam, call_mutations, write_mutations
from mutscan.accuracy import Mutation, evaluate
from mutscan.converter import mutation_type

reference = read_fasta("lambda.fasta")
records = read_sam("lambda.sam")
calls = call_mutations(records, reference)   # {position: (type, base)}
write_mutations(calls, "calls.csv")

predicted = [Mutation(kind, pos, base) for pos, (kind, base) in calls.items()]
expected = [Mutation("X", 100, "A"), Mutation("D", 250, "-")]
print(f"Mutation detection accuracy: {evaluate(predicted, expected):.6f}%")

mutation_type("A", "AT")   # "I"
mutation_type("AT", "A")   # "D"
mutation_type("A", "G")    # "X"
```

Other functions: `caller.collect_votes` returns the `PositionVotes` for each
position (and writes the per-base trace to an optional text stream),
`caller.decide` makes the call for one position, `caller.format_votes` renders
the votes report, `caller.parse_cigar` yields `(length, operation)` pairs, and
`caller.reverse_complement` reverses and complements a sequence.
`accuracy.load_mutations` reads a mutation CSV, skipping its first line as a
header, and `converter.convert_vcf` yields CSV rows from VCF lines.

Notes:

* SAM records whose flag marks the read as unmapped, and lines with fewer than
  eleven fields, are skipped.
* For a multi-allelic VCF record, `mutation_type` looks only at the first ALT
  allele.
* `write_mutations` writes no header line, while `load_mutations` always skips
  the first line; add a header before scoring such a file.
* The converter's rows put the position first, so its output is not in the
  format `mutscan.accuracy` reads.

## What it does not do

The caller uses no base or mapping qualities, does not reverse-complement
reads on the reverse strand, and writes plain CSV rather than VCF. It handles
only the `M`, `I`, `D` and `S` CIGAR operations; others are ignored.

## Tests

```
pytest
```