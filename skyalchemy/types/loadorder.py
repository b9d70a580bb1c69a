import os
from pathlib import Path

from skyalchemy import exceptions
from skyalchemy.constants import SkyrimGameInfo, EnvVars
from skyalchemy.skylog import newLogger
from skyalchemy.utils.fsutils import find_path_ci

_logger = newLogger(__name__)

# plugins.txt and Skyrim.ccc are written by the game in the ANSI codepage
_LIST_ENCODING = "cp1252"


def is_creation_club_light_master(plugin_name):
    plugin_name = plugin_name.lower()
    return plugin_name.startswith("cc") and plugin_name.endswith(".esl")


def default_local_path():
    """
    Where the game keeps plugins.txt:
    ``%LOCALAPPDATA%/Skyrim Special Edition``.

    :return: Path, or None if LOCALAPPDATA is not set (e.g. under WSL)
    """
    base = os.getenv(EnvVars.LOCAL_APPDATA.value)
    if not base:
        return None
    return Path(base, SkyrimGameInfo.local_appdata_dir)


def _read_list_file(path):
    """Yield the non-blank, non-comment lines of a plugin list file"""
    with open(path, encoding=_LIST_ENCODING, errors="replace") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                yield line


class LoadOrder:
    """
    The ordered list of active plugin file names. A plugin's position
    in this list is the ``load_order_index`` of every GlobalFormId it
    defines.

    Lookups by name ignore case, as the game does.
    """

    def __init__(self, entries=()):
        """
        :param entries: plugin file names in load order
        """
        self._entries = list(entries)

    @classmethod
    def from_game(cls, game_path, local_path=None):
        """
        Build the active load order for an installed game.

        Implicitly active masters come first, followed by the Creation
        Club plugins named in Skyrim.ccc, followed by the plugins marked
        active ('*' prefix) in plugins.txt. Only plugins that exist in
        the Data folder are included.

        :param str|Path game_path: directory containing SkyrimSE.exe
        :param str|Path local_path: directory containing plugins.txt;
            defaults to %LOCALAPPDATA%/Skyrim Special Edition
        """
        game_path = Path(game_path)
        data_path = game_path / SkyrimGameInfo.data_dir

        if local_path is None:
            local_path = default_local_path()
            if local_path is None:
                raise exceptions.LoadOrderError(
                    "Cannot determine the directory containing {}; "
                    "set LOCALAPPDATA or pass a local path".format(
                        SkyrimGameInfo.plugins_file))

        plugins_file = Path(local_path) / SkyrimGameInfo.plugins_file
        if not plugins_file.is_file():
            raise exceptions.LoadOrderError(
                "Plugins file not found: '{}'".format(plugins_file))

        load_order = cls()

        def add(name, warn_missing):
            if load_order.index_of(name) is not None:
                return
            found = find_path_ci(data_path, name)
            if found is None or not found.is_file():
                if warn_missing:
                    _logger.warning("Active plugin %s is not in %s; "
                                    "skipping it", name, data_path)
                return
            load_order.append(found.name)

        for master in SkyrimGameInfo.implicit_masters:
            add(master, False)

        ccc_file = find_path_ci(game_path, SkyrimGameInfo.ccc_file)
        if ccc_file is not None and ccc_file.is_file():
            for name in _read_list_file(ccc_file):
                add(name, False)
        elif data_path.is_dir():
            # without Skyrim.ccc, Creation Club plugins load in
            # alphabetical order
            # See https://en.uesp.net/wiki/Skyrim:Form_ID#Creation_Club
            for name in sorted((p.name for p in data_path.iterdir()
                                if is_creation_club_light_master(p.name)),
                               key=str.lower):
                add(name, False)

        for line in _read_list_file(plugins_file):
            if line.startswith("*"):
                add(line[1:].strip(), True)

        _logger.debug("Read load order from %s:\n%s", plugins_file,
                      load_order)
        return load_order

    ##=============================================
    ## Access
    ##=============================================

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other):
        if not isinstance(other, LoadOrder):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        return "LoadOrder({!r})".format(self._entries)

    def __str__(self):
        return "\n".join("{:04}: {}".format(i, e)
                         for i, e in enumerate(self._entries))

    def is_empty(self):
        return not self._entries

    def get(self, index):
        """Return the plugin name at `index`, or None"""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def index_of(self, plugin_name):
        """
        Find the position of `plugin_name`, ignoring case.

        :param str plugin_name:
        :return: int index or None if not present
        """
        lname = plugin_name.lower()
        for i, name in enumerate(self._entries):
            if name.lower() == lname:
                return i
        return None

    def append(self, plugin_name):
        self._entries.append(plugin_name)

    def to_list(self):
        return list(self._entries)

    ##=============================================
    ## Compacting
    ##=============================================

    def drain_unused(self, used_indexes):
        """
        Removes entries from the LoadOrder whose index is not in
        `used_indexes`.

        :param used_indexes: iterable of indexes that are referenced by
            something and must be kept
        :return: None if nothing was removed. Otherwise a dict of old
            index to new index which must be used to update any
            existing indexes into the LoadOrder.
        """
        used = set(used_indexes)
        for index in used:
            if self.get(index) is None:
                raise IndexError(
                    "load order index {} out of range".format(index))

        kept = [(i, e) for i, e in enumerate(self._entries) if i in used]
        num_removed = len(self._entries) - len(kept)

        if num_removed == 0:
            return None

        self._entries = [e for _, e in kept]
        _logger.debug("Removed %d unused entries from load order",
                      num_removed)

        return {old: new for new, (old, _) in enumerate(kept)}
