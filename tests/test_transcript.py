import hashlib

import pytest

from transcript import Transcript


def test_same_calls_same_challenges():
    a = Transcript("proto")
    b = Transcript("proto")
    for t in (a, b):
        t.append_message("m1", b"hello")
        t.append_message("m2", b"world")
    assert a.challenge_bytes("c", 32) == b.challenge_bytes("c", 32)
    assert a.state == b.state


def test_protocol_label_separates_transcripts():
    a = Transcript("proto-a")
    b = Transcript("proto-b")
    assert a.challenge_bytes("c", 32) != b.challenge_bytes("c", 32)


def test_str_and_bytes_labels_are_equivalent():
    a = Transcript("proto")
    b = Transcript(b"proto")
    a.append_message("m", b"x")
    b.append_message(b"m", b"x")
    assert a.challenge_bytes("c", 16) == b.challenge_bytes(b"c", 16)


def test_label_and_data_boundaries_are_framed():
    a = Transcript("proto")
    b = Transcript("proto")
    a.append_message("ab", b"c")
    b.append_message("a", b"bc")
    assert a.state != b.state


def test_extraction_changes_state_and_is_not_idempotent():
    t = Transcript("proto")
    before = t.state
    first = t.challenge_bytes("c", 32)
    assert t.state != before
    assert t.challenge_bytes("c", 32) != first


def test_challenge_length_and_prefix_relation():
    t = Transcript("proto")
    out = t.challenge_bytes("c", 100)
    assert len(out) == 100

    # the requested length is bound into the output
    a = Transcript("proto").challenge_bytes("c", 16)
    b = Transcript("proto").challenge_bytes("c", 32)
    assert b[:16] != a


def test_initial_state_is_framed_sha256():
    t = Transcript("decree")
    expected = hashlib.sha256(
        (11).to_bytes(8, "big") + b"decree.init" + (6).to_bytes(8, "big") + b"decree"
    ).digest()
    assert t.state == expected


@pytest.mark.parametrize("n", [0, -1, 1.5, True])
def test_rejects_bad_lengths(n):
    with pytest.raises(ValueError):
        Transcript("proto").challenge_bytes("c", n)


def test_rejects_non_bytes_messages():
    with pytest.raises(TypeError):
        Transcript("proto").append_message("m", 5)
    with pytest.raises(TypeError):
        Transcript(5)


def test_only_the_chaining_value_is_kept():
    t = Transcript("proto")
    t.append_message("a", b"x")
    t.challenge_bytes("c", 8)
    assert vars(t) == {"state": t.state}
    assert len(t.state) == 32
