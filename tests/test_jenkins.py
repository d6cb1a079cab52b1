"""Name hash compliance tests."""

import pytest

from avarc.jenkins import hash_bytes, hash_string


def test_known_vectors():
    assert hash_string("ui/intro.gfx") == 2386027578
    assert hash_string("rico rodriguez :3") == 1080157782


def test_empty_input():
    value = hash_bytes(b"")
    assert 0 <= value <= 0xFFFFFFFF
    assert hash_string("") == value


def test_string_matches_utf8_bytes():
    assert hash_string("rico rodriguez :3") == hash_bytes(b"rico rodriguez :3", 0)


def test_deterministic():
    data = bytes(range(256)) * 3
    assert hash_bytes(data) == hash_bytes(data)


def test_seed_changes_digest():
    assert hash_bytes(b"ui/intro.gfx", 1) != hash_bytes(b"ui/intro.gfx", 0)


def test_case_sensitive():
    assert hash_string("UI/intro.gfx") != hash_string("ui/intro.gfx")


@pytest.mark.parametrize("length", [1, 4, 11, 12, 13, 23, 24, 25, 100])
def test_block_boundaries_stay_32_bit(length):
    value = hash_bytes(b"\xff" * length, 0xFFFFFFFF)
    assert 0 <= value <= 0xFFFFFFFF
