import logging

import pytest

from skyalchemy import exceptions
from skyalchemy.types import LoadOrder
from skyalchemy.types.loadorder import (is_creation_club_light_master,
                                        default_local_path)

VANILLA = ["Skyrim.esm", "Update.esm", "Dawnguard.esm", "HearthFires.esm",
           "Dragonborn.esm"]


@pytest.fixture()
def installed(game_dir):
    for name in VANILLA + ["ccBGSSSE001-Fish.esm", "ccQDRSSE001-SurvivalMode.esl",
                           "ccBGSSSE025-AdvDSGS.esm", "Unofficial Patch.esp",
                           "Mod.esp", "Inactive.esp"]:
        game_dir.add_plugin(name)
    return game_dir


def test_from_game(installed):
    installed.write_ccc("Skyrim.esm", "Update.esm", "Dawnguard.esm",
                        "HearthFires.esm", "Dragonborn.esm",
                        "ccBGSSSE001-Fish.esm",
                        "ccQDRSSE001-SurvivalMode.esl",
                        "ccBGSSSE025-AdvDSGS.esm")
    installed.write_plugins_txt("# This file is used by Skyrim to keep track "
                                "of your downloaded content.",
                                "*Unofficial Patch.esp",
                                "Inactive.esp",
                                "",
                                "*Mod.esp")

    load_order = LoadOrder.from_game(installed.game_path,
                                     installed.local_path)

    assert load_order.to_list() == VANILLA + [
        "ccBGSSSE001-Fish.esm", "ccQDRSSE001-SurvivalMode.esl",
        "ccBGSSSE025-AdvDSGS.esm", "Unofficial Patch.esp", "Mod.esp"]


def test_from_game_without_ccc(installed):
    installed.write_plugins_txt("*Mod.esp")

    load_order = LoadOrder.from_game(installed.game_path,
                                     installed.local_path)

    # .esm Creation Club content is only picked up through Skyrim.ccc
    assert load_order.to_list() == VANILLA + [
        "ccQDRSSE001-SurvivalMode.esl", "Mod.esp"]


def test_from_game_skips_missing_and_duplicates(installed, caplog):
    caplog.set_level(logging.WARNING)
    installed.write_ccc("ccBGSSSE037-Curios.esl")
    installed.write_plugins_txt("*mod.esp", "*Gone.esp", "*MOD.ESP",
                                "*Skyrim.esm")

    load_order = LoadOrder.from_game(installed.game_path,
                                     installed.local_path)

    # names come from the files on disk
    assert load_order.to_list() == VANILLA + ["Mod.esp"]
    assert "Gone.esp" in caplog.text
    assert "Curios" not in caplog.text


def test_from_game_missing_implicit_master(game_dir):
    game_dir.add_plugin("Skyrim.esm")
    game_dir.add_plugin("Update.esm")
    game_dir.write_plugins_txt()

    load_order = LoadOrder.from_game(game_dir.game_path, game_dir.local_path)

    assert load_order.to_list() == ["Skyrim.esm", "Update.esm"]


def test_from_game_missing_plugins_txt(game_dir):
    with pytest.raises(exceptions.LoadOrderError, match="plugins.txt"):
        LoadOrder.from_game(game_dir.game_path, game_dir.local_path)


def test_default_local_path(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    assert default_local_path() == tmp_path / "Skyrim Special Edition"

    monkeypatch.delenv("LOCALAPPDATA")
    assert default_local_path() is None


def test_from_game_without_local_path(game_dir, monkeypatch):
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    with pytest.raises(exceptions.LoadOrderError, match="LOCALAPPDATA"):
        LoadOrder.from_game(game_dir.game_path)


def test_plugins_txt_is_ansi(game_dir):
    game_dir.add_plugin("Skyrim.esm")
    game_dir.add_plugin("Café.esp")
    game_dir.write_plugins_txt("*Café.esp")

    load_order = LoadOrder.from_game(game_dir.game_path, game_dir.local_path)

    assert load_order.to_list() == ["Skyrim.esm", "Café.esp"]


@pytest.mark.parametrize("name, expect", [
    ("ccBGSSSE037-Curios.esl", True),
    ("CCQDRSSE001-SURVIVALMODE.ESL", True),
    ("ccBGSSSE001-Fish.esm", False),
    ("Mod.esl", False),
])
def test_is_creation_club_light_master(name, expect):
    assert is_creation_club_light_master(name) == expect


##=============================================
## Access and compacting
##=============================================

def test_index_of():
    load_order = LoadOrder(["Skyrim.esm", "Mod.esp"])

    assert load_order.index_of("MOD.esp") == 1
    assert load_order.index_of("Other.esp") is None
    assert load_order.get(1) == "Mod.esp"
    assert load_order.get(2) is None
    assert load_order[0] == "Skyrim.esm"
    assert len(load_order) == 2
    assert not load_order.is_empty()
    assert LoadOrder().is_empty()


def test_str():
    load_order = LoadOrder(["Skyrim.esm", "Mod.esp"])
    assert str(load_order) == "0000: Skyrim.esm\n0001: Mod.esp"


def test_drain_unused():
    load_order = LoadOrder(["a.esm", "b.esm", "c.esp", "d.esp"])

    remap = load_order.drain_unused([3, 0, 3])

    assert load_order.to_list() == ["a.esm", "d.esp"]
    assert remap == {0: 0, 3: 1}


def test_drain_unused_nothing_to_do():
    load_order = LoadOrder(["a.esm", "b.esm"])

    assert load_order.drain_unused([0, 1]) is None
    assert load_order.to_list() == ["a.esm", "b.esm"]


def test_drain_unused_bad_index():
    with pytest.raises(IndexError):
        LoadOrder(["a.esm"]).drain_unused([1])
