import logging
import subprocess
from unittest import mock

import pytest

from skyalchemy import cli, skylog
from skyalchemy.types import GameData

import builders as b


@pytest.fixture(autouse=True)
def restore_log_level():
    logger = logging.getLogger(skylog.ROOT_LOGGER)
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture()
def data_file(game_data, tmp_path):
    path = tmp_path / "game_data.json"
    game_data.save(path)
    return str(path)


def write_config(path, **values):
    sections = {"Launcher": ("modorganizer_path", "shortcut", "launch_mode"),
                "Game": ("game_path", "local_path")}
    lines = []
    for section, keys in sections.items():
        lines.append("[{}]".format(section))
        lines.extend("{} = {}".format(k, values[k]) for k in keys
                     if k in values)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


##=============================================
## Arguments
##=============================================

@pytest.mark.parametrize("argv", [
    [],
    ["brew"],
    ["suggest-potions"],
    ["suggest-potions", "--limit", "0", "data.json"],
    ["suggest-potions", "--limit", "lots", "data.json"],
    ["suggest-potions", "--ingredients-blacklist-path", "a.txt",
     "--ingredients-whitelist-path", "b.txt", "data.json"],
    ["export-game-data"],
])
def test_bad_arguments(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_parser_defaults():
    args = cli.build_parser().parse_args(["suggest-potions", "data.json"])

    assert args.limit == 20
    assert args.verbose == 0
    assert args.ingredients_blacklist_path is None
    assert args.func is cli.cmd_suggest_potions


@pytest.mark.parametrize("flags, level", [
    ([], logging.INFO),
    (["-v"], logging.DEBUG),
    (["-vv"], skylog.TRACE),
])
def test_verbosity(flags, level, data_file):
    assert cli.main(flags + ["suggest-potions", data_file]) == 0
    assert logging.getLogger(skylog.ROOT_LOGGER).level == level


def test_log_file(data_file, tmp_path):
    log_file = tmp_path / "skyalchemy.log"

    assert cli.main(["-v", "--log-file", str(log_file), "suggest-potions",
                     data_file]) == 0

    assert "Mixing 5 of 5 ingredients" in log_file.read_text(
        encoding="utf-8")


##=============================================
## suggest-potions
##=============================================

def test_suggest_potions(data_file, capsys):
    assert cli.main(["suggest-potions", "--limit", "1", data_file]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Potion of Cure Disease\n")
    assert "Value: 36 gold" in out
    assert "Value: 21 gold" not in out


def test_suggest_potions_whitelist(data_file, tmp_path, capsys):
    whitelist = tmp_path / "whitelist.txt"
    whitelist.write_text("Nightshade\nSalt Pile\n", encoding="utf-8")

    assert cli.main(["suggest-potions", "--ingredients-whitelist-path",
                     str(whitelist), data_file]) == 0

    assert "Potion of Waterbreathing" in capsys.readouterr().out


def test_suggest_potions_missing_data(tmp_path, caplog):
    caplog.set_level(logging.ERROR)

    assert cli.main(["suggest-potions", str(tmp_path / "nope.json")]) == 1
    assert "nope.json" in caplog.text


##=============================================
## export-game-data
##=============================================

@pytest.fixture()
def installed(game_dir):
    game_dir.add_plugin("Skyrim.esm", b.plugin(
        magic_effects=[b.magic_effect(0x801, "Fx", "Fx", 0x600, 2.0)],
        ingredients=[b.ingredient(0x800, "Thing", "Thing",
                                  [(0x801, 1.0, 0)])]))
    game_dir.write_plugins_txt()
    return game_dir


def test_export_game_data(installed, tmp_path):
    export_path = tmp_path / "game_data.json"

    assert cli.main(["export-game-data",
                     "--game-path", str(installed.game_path),
                     "--local-path", str(installed.local_path),
                     "--language", "english", str(export_path)]) == 0

    game_data = GameData.load(export_path)
    assert [i.name for i in game_data.ingredients.values()] == ["Thing"]


def test_export_game_data_from_config(installed, tmp_path):
    config = write_config(tmp_path / "skyalchemy.ini",
                          game_path=installed.game_path,
                          local_path=installed.local_path)
    export_path = tmp_path / "game_data.json"

    assert cli.main(["--config", config, "export-game-data",
                     str(export_path)]) == 0
    assert export_path.exists()


def test_export_game_data_save_paths(installed, tmp_path):
    config = write_config(tmp_path / "skyalchemy.ini")

    assert cli.main(["--config", config, "export-game-data",
                     "--game-path", str(installed.game_path),
                     "--local-path", str(installed.local_path),
                     "--save-paths", str(tmp_path / "first.json")]) == 0

    text = (tmp_path / "skyalchemy.ini").read_text(encoding="utf-8")
    assert "game_path = {}".format(installed.game_path) in text
    assert "local_path = {}".format(installed.local_path) in text

    # the saved paths are enough from now on
    assert cli.main(["--config", config, "export-game-data",
                     str(tmp_path / "second.json")]) == 0
    assert (tmp_path / "second.json").exists()


def test_export_game_data_no_game_path(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    config = write_config(tmp_path / "skyalchemy.ini")

    assert cli.main(["--config", config, "export-game-data",
                     str(tmp_path / "game_data.json")]) == 1
    assert "No game path given" in caplog.text


##=============================================
## launch
##=============================================

@pytest.fixture()
def launch_config(tmp_path):
    exe = tmp_path / "ModOrganizer.exe"
    exe.write_bytes(b"MZ")
    return write_config(tmp_path / "skyalchemy.ini",
                        modorganizer_path=exe, shortcut="skyrim-alchemy",
                        launch_mode="direct")


@pytest.mark.parametrize("returncode", [0, 7])
def test_launch(launch_config, tmp_path, returncode):
    with mock.patch("skyalchemy.managers.launcher.subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess([], returncode)

        assert cli.main(["--config", launch_config, "launch"]) == returncode

    (command,), _ = run.call_args
    assert command == [str(tmp_path / "ModOrganizer.exe"),
                       "moshortcut://:skyrim-alchemy"]


def test_launch_missing_executable(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    config = write_config(tmp_path / "skyalchemy.ini",
                          modorganizer_path=tmp_path / "nope.exe",
                          launch_mode="direct")

    with mock.patch("skyalchemy.managers.launcher.subprocess.run") as run:
        assert cli.main(["--config", config, "launch"]) == 1
        run.assert_not_called()

    assert "Executable not found" in caplog.text


def test_launch_invalid_mode(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    config = write_config(tmp_path / "skyalchemy.ini",
                          launch_mode="carrier-pigeon")

    assert cli.main(["--config", config, "launch"]) == 1
    assert "carrier-pigeon" in caplog.text


def test_launch_config_from_environment(launch_config, tmp_path,
                                        monkeypatch):
    # no --config; the directory comes from the environment
    monkeypatch.setenv("SKA_CONFIG_DIR", str(tmp_path))

    with mock.patch("skyalchemy.managers.launcher.subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess([], 0)

        assert cli.main(["launch"]) == 0

    (command,), _ = run.call_args
    assert command[0] == str(tmp_path / "ModOrganizer.exe")
