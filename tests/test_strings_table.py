import pytest

from skyalchemy import exceptions
from skyalchemy.plugins.strings_table import (StringsTable, StringsLocation,
                                              find_strings_file,
                                              get_strings_path, get_bsa_name,
                                              DLSTRINGS)

import builders as b


@pytest.mark.parametrize("plugin, language, expect", [
    ("Skyrim.esm", "english", "strings/skyrim_english.strings"),
    ("Dawnguard.esm", "French", "strings/dawnguard_french.strings"),
    ("My Mod.esp", "english", "strings/my mod_english.strings"),
])
def test_get_strings_path(plugin, language, expect):
    assert get_strings_path(plugin, language) == expect


def test_get_dlstrings_path():
    assert get_strings_path("Skyrim.esm", "english", DLSTRINGS) == \
        "strings/skyrim_english.dlstrings"


@pytest.mark.parametrize("plugin, expect", [
    ("Skyrim.esm", "Skyrim - Interface.bsa"),
    ("HearthFires.esm", "Skyrim - Interface.bsa"),
    ("Unofficial Patch.esp", "Unofficial Patch.bsa"),
])
def test_get_bsa_name(plugin, expect):
    assert get_bsa_name(plugin) == expect


def test_table_from_data():
    table = StringsTable(data=b.strings_file({1: "One", 0x200: "Two",
                                              3: ""}))

    assert table.loaded
    assert len(table) == 3
    assert table.get(1) == "One"
    assert table.get(0x200) == "Two"
    assert table.get(3) == ""
    assert table.get(99) is None


def test_table_size_mismatch():
    data = b.strings_file({1: "One"}) + b"extra"
    with pytest.raises(exceptions.StringsTableError):
        StringsTable(data=data)


def test_table_truncated_directory():
    data = b.strings_file({1: "One", 2: "Two"})[:12]
    with pytest.raises(exceptions.StringsTableError):
        StringsTable(data=data)


def test_table_needs_a_source():
    with pytest.raises(ValueError):
        StringsTable()


def test_table_loads_lazily(tmp_path):
    path = tmp_path / "mod_english.strings"
    path.write_bytes(b.strings_file({7: "Seven"}))

    table = StringsTable(StringsLocation(str(path), None))
    assert not table.loaded

    assert table.get(7) == "Seven"
    assert table.loaded


def test_find_strings_file_on_disk(game_dir):
    path = game_dir.add_file("Strings/Mod_ENGLISH.strings",
                             b.strings_file({}))

    location = find_strings_file("Mod.esp", game_dir.data_path)

    assert location == StringsLocation(str(path), None)


def test_find_strings_file_prefers_disk(game_dir):
    path = game_dir.add_file("strings/mod_english.strings",
                             b.strings_file({1: "loose"}))
    game_dir.add_plugin("Mod.bsa", b.bsa(
        {"strings/mod_english.strings": b.strings_file({1: "packed"})}))

    location = find_strings_file("Mod.esp", game_dir.data_path)

    assert location.path == str(path)
    assert StringsTable(location).get(1) == "loose"


def test_find_strings_file_in_interface_archive(game_dir):
    archive = game_dir.add_plugin("Skyrim - Interface.bsa", b.bsa(
        {"strings/update_english.strings": b.strings_file({1: "Update"})},
        version=104, compressed=True))

    location = find_strings_file("Update.esm", game_dir.data_path)

    assert location == StringsLocation(str(archive),
                                       "strings/update_english.strings")
    assert StringsTable(location).get(1) == "Update"


def test_find_strings_file_not_found(game_dir):
    game_dir.add_plugin("Mod.bsa", b.bsa({"meshes/thing.nif": b"nif"}))

    assert find_strings_file("Mod.esp", game_dir.data_path) is None
    assert find_strings_file("Other.esp", game_dir.data_path) is None
    assert StringsTable.for_plugin("Other.esp", game_dir.data_path) is None


def test_find_strings_file_rejects_paths(game_dir):
    with pytest.raises(ValueError):
        find_strings_file("sub/Mod.esp", game_dir.data_path)


def test_length_prefixed_table():
    data = b.strings_file({1: "First description", 2: "Second"},
                          length_prefixed=True)
    table = StringsTable(data=data, length_prefixed=True)

    assert table.get(1) == "First description"
    assert table.get(2) == "Second"
    assert table.get(3) is None

    # read as a plain table, the length shows up as text
    assert StringsTable(data=data).get(2) != "Second"


def test_length_prefixed_past_the_end():
    data = bytearray(b.strings_file({1: "Cut"}, length_prefixed=True))
    # offset of string 1 moved to the last byte
    data[12:16] = (len(data) - 16 - 1).to_bytes(4, "little")

    assert StringsTable(data=bytes(data), length_prefixed=True).get(1) \
        is None


def test_find_dlstrings_file(game_dir):
    archive = game_dir.add_plugin("Mod.bsa", b.bsa({
        "strings/mod_english.strings": b.strings_file({5: "Name"}),
        "strings/mod_english.dlstrings":
            b.strings_file({5: "Five"}, length_prefixed=True),
    }))

    location = find_strings_file("Mod.esp", game_dir.data_path,
                                 extension=DLSTRINGS)
    assert location == StringsLocation(str(archive),
                                       "strings/mod_english.dlstrings")

    table = StringsTable.for_plugin("Mod.esp", game_dir.data_path,
                                    extension=DLSTRINGS)
    assert table.length_prefixed
    assert table.get(5) == "Five"
    assert not StringsTable.for_plugin("Mod.esp",
                                       game_dir.data_path).length_prefixed
