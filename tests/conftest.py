import logging

import pytest

from skyalchemy import skylog
from skyalchemy.types import GameData

from builders import (make_effect, make_ingredient, FLAT, HOSTILE,
                      CURE_DISEASE, RESIST_FROST, FORTIFY_SNEAK,
                      DAMAGE_STAMINA, WATERBREATHING)


class GameDir:
    """A fake Skyrim installation under a temporary directory"""

    def __init__(self, root):
        self.game_path = root / "Skyrim Special Edition"
        self.data_path = self.game_path / "Data"
        self.local_path = root / "AppData" / "Local" / "Skyrim Special Edition"

        self.data_path.mkdir(parents=True)
        self.local_path.mkdir(parents=True)

    def add_plugin(self, name, contents=b""):
        path = self.data_path / name
        path.write_bytes(contents)
        return path

    def add_file(self, relpath, contents):
        path = self.data_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(contents)
        return path

    def write_plugins_txt(self, *lines):
        (self.local_path / "plugins.txt").write_text(
            "\r\n".join(lines) + "\r\n", encoding="cp1252")

    def write_ccc(self, *lines):
        (self.game_path / "Skyrim.ccc").write_text(
            "\r\n".join(lines) + "\r\n", encoding="cp1252")


@pytest.fixture()
def game_dir(tmp_path):
    return GameDir(tmp_path)


@pytest.fixture()
def debug_logging(caplog):
    """Let debug records from the package logger reach caplog"""
    caplog.set_level(logging.DEBUG, logger=skylog.ROOT_LOGGER)
    return caplog


@pytest.fixture()
def magic_effects():
    return [
        make_effect(CURE_DISEASE, "Cure Disease", 21),
        make_effect(RESIST_FROST, "Resist Frost", 10),
        make_effect(FORTIFY_SNEAK, "Fortify Sneak", 5),
        make_effect(DAMAGE_STAMINA, "Damage Stamina", 30,
                    flags=FLAT | HOSTILE),
        make_effect(WATERBREATHING, "Waterbreathing", 8),
    ]


@pytest.fixture()
def ingredients():
    return [
        make_ingredient(0x201, "Charred Skeever Hide", CURE_DISEASE,
                        RESIST_FROST),
        make_ingredient(0x202, "Hawk Feathers", CURE_DISEASE,
                        FORTIFY_SNEAK),
        make_ingredient(0x203, "Mudcrab Chitin", RESIST_FROST,
                        FORTIFY_SNEAK),
        make_ingredient(0x204, "Nightshade", DAMAGE_STAMINA,
                        WATERBREATHING),
        make_ingredient(0x205, "Salt Pile", WATERBREATHING),
    ]


@pytest.fixture()
def game_data(ingredients, magic_effects):
    return GameData(["Skyrim.esm"], ingredients, magic_effects)
