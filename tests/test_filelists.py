"""Name index loading and msgpack cache tests."""

import msgpack
import pytest

from avarc.errors import FormatError
from avarc.filelists import (
    FileListEntry,
    load_cache,
    load_file_lists,
    name_map,
    parse_file_list,
    save_cache,
)
from avarc.jenkins import hash_string


def test_parse_skips_comments_and_blanks():
    text = "; comment\n\nui/intro.gfx\r\n  textures/a.ddsc  \n;x\n"
    entries = parse_file_list(text, "game0")
    assert entries == [
        FileListEntry("ui/intro.gfx", 2386027578, "game0"),
        FileListEntry("textures/a.ddsc", hash_string("textures/a.ddsc"), "game0"),
    ]


def test_parse_applies_predicate():
    entries = parse_file_list("a/1\nb/2\na/3\n", predicate=lambda n: n.startswith("a/"))
    assert [e.name for e in entries] == ["a/1", "a/3"]


def test_load_keys_by_relative_path(tmp_path):
    (tmp_path / "archives_win64").mkdir()
    (tmp_path / "archives_win64" / "game0.filelist").write_text("ui/intro.gfx\n")
    (tmp_path / "archives_win64" / "game1.filelist").write_text("; nothing\n")
    (tmp_path / "dlc.filelist").write_text("dlc/x\n")
    (tmp_path / "notes.txt").write_text("ignored\n")

    lists = load_file_lists(tmp_path)
    assert list(lists) == ["archives_win64/game0", "dlc"]
    assert lists["archives_win64/game0"][0].arc_name == "archives_win64/game0"
    assert lists["dlc"][0].name_hash == hash_string("dlc/x")


def test_name_map_first_name_wins():
    lists = {
        "a": [FileListEntry("x", 1), FileListEntry("y", 2)],
        "b": [FileListEntry("z", 1)],
    }
    assert name_map(lists) == {1: "x", 2: "y"}


def test_cache_roundtrip(tmp_path):
    lists = {"game0": parse_file_list("ui/intro.gfx\nfoo\n", "game0")}
    path = tmp_path / "lists.msgpack"
    save_cache(path, lists)
    assert load_cache(path) == lists


def test_cache_version_checked(tmp_path):
    path = tmp_path / "lists.msgpack"
    path.write_bytes(msgpack.packb({"version": 99, "lists": {}}))
    with pytest.raises(FormatError):
        load_cache(path)
