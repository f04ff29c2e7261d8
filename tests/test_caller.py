import io

import pytest

from mutscan.caller import (
    PositionVotes,
    SamRecord,
    call_mutations,
    collect_votes,
    decide,
    format_votes,
    main,
    parse_cigar,
    parse_sam_line,
    read_fasta,
    read_sam,
    reverse_complement,
    write_mutations,
)


def _sam(qname, flag, pos, cigar, seq):
    return "\t".join([qname, str(flag), "chr", str(pos), "60", cigar, "*", "0", "0", seq, "*"])


def _rec(pos, cigar, seq, flag=0):
    return SamRecord("r", flag, "chr", pos, cigar, seq)


@pytest.mark.parametrize("seq", ["ACGT", "AATTGGCC", "ANCGT", ""])
def test_reverse_complement_round_trip(seq):
    assert reverse_complement(reverse_complement(seq)) == seq


def test_reverse_complement_reverses_and_keeps_unknown():
    result = reverse_complement("AAN")
    assert result[0] == "N"
    assert result[1:] == "TT"


def test_read_fasta_joins_sequence_lines(tmp_path):
    path = tmp_path / "r.fasta"
    path.write_text(">chr\nACGT\n\nTTGA\n")
    assert read_fasta(path) == "ACGTTTGA"


def test_read_fasta_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_fasta(tmp_path / "none.fasta")


def test_parse_sam_line_fields():
    record = parse_sam_line(_sam("q1", 16, 42, "5M", "ACGTA"))
    assert record == SamRecord("q1", 16, "chr", 42, "5M", "ACGTA")


def test_parse_sam_line_unmapped_is_none():
    assert parse_sam_line(_sam("q1", 4, 42, "5M", "ACGTA")) is None


def test_parse_sam_line_short_is_none():
    assert parse_sam_line("a\tb\tc\t") is None
    assert parse_sam_line("") is None


def test_read_sam_skips_header(tmp_path):
    path = tmp_path / "a.sam"
    path.write_text("@HD\tVN:1.0\n" + _sam("q1", 0, 1, "2M", "AC") + "\n"
                    + _sam("q2", 4, 1, "2M", "AC") + "\n")
    records = read_sam(path)
    assert [r.qname for r in records] == ["q1"]


def test_parse_cigar():
    assert list(parse_cigar("10M2I3D")) == [(10, "M"), (2, "I"), (3, "D")]
    assert list(parse_cigar("5")) == []
    assert list(parse_cigar("M")) == [(0, "M")]


def test_collect_votes_match_and_substitution():
    trace = io.StringIO()
    votes = collect_votes([_rec(1, "4M", "ACGA")], "ACGTACGT", trace)
    assert [votes[p].none for p in range(3)] == [1, 1, 1]
    assert votes[3].substituted == 1
    assert votes[3].substitution_bases == ["A"]
    assert "[MISS]" in trace.getvalue()
    assert trace.getvalue().count("[MATCH]") == 3


def test_collect_votes_insertion():
    votes = collect_votes([_rec(1, "2M1I2M", "ACTGT")], "ACGT")
    assert votes[2].inserted == 1
    assert votes[2].insertion_bases == ["T"]
    assert votes[2].none == 1
    assert votes[3].none == 1


def test_collect_votes_deletion():
    votes = collect_votes([_rec(1, "1M1D2M", "AGT")], "ACGT")
    assert votes[1].deleted == 1
    assert votes[2].none == 1 and votes[3].none == 1


def test_collect_votes_soft_clip():
    votes = collect_votes([_rec(1, "1S3M", "TACG")], "ACGT")
    assert sorted(votes) == [0, 1, 2]
    assert all(v.none == 1 for v in votes.values())


def test_collect_votes_position_zero_gives_no_match_votes():
    assert collect_votes([_rec(0, "3M", "ACG")], "ACGT") == {}


def test_decide_kinds():
    assert decide(PositionVotes(none=5)) == ("none", "-")
    assert decide(PositionVotes(inserted=3, insertion_bases=["G", "G", "T"])) == ("I", "G")
    assert decide(PositionVotes(deleted=3)) == ("D", "-")


def test_decide_needs_more_than_two_votes():
    assert decide(PositionVotes(substituted=2, substitution_bases=["A", "A"])) == ("none", "-")


def test_decide_needs_forty_percent():
    votes = PositionVotes(none=3, substituted=3, inserted=2, deleted=2,
                          substitution_bases=["A"] * 3, insertion_bases=["C"] * 2)
    assert decide(votes) == ("none", "-")


def test_decide_tie_goes_to_first_base_reaching_max():
    votes = PositionVotes(substituted=4, substitution_bases=["A", "C", "C", "A"])
    assert decide(votes) == ("X", "C")


def test_format_votes_lists_bases():
    text = format_votes({7: PositionVotes(substituted=2, substitution_bases=["A", "C"])})
    assert "Position: 7\n" in text
    assert "[A,C,]" in text


def test_call_mutations_and_write(tmp_path):
    records = [_rec(1, "4M", "ACGA") for _ in range(3)]
    calls = call_mutations(records, "ACGT")
    assert calls == {3: ("X", "A")}
    out = tmp_path / "out.csv"
    write_mutations(calls, out)
    assert out.read_text() == "X,3,A\n"


def test_main_writes_outputs(tmp_path):
    (tmp_path / "lambda.fasta").write_text(">chr\nACGT\n")
    (tmp_path / "lambda.sam").write_text(
        "".join(_sam(f"q{i}", 0, 1, "4M", "ACGA") + "\n" for i in range(3))
    )
    assert main(["--data-dir", str(tmp_path)]) == 0
    assert (tmp_path / "lambda_mutations1.csv").read_text() == "X,3,A\n"
    assert "[MISS]" in (tmp_path / "matching.txt").read_text()
    assert "Position: 3" in (tmp_path / "voting.txt").read_text()