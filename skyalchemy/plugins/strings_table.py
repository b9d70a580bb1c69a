"""
Lookup of localized strings (lstrings) for plugins that keep their
text in separate .strings files.

See https://en.uesp.net/wiki/Skyrim_Mod:String_Table_File_Format
"""
import struct
from collections import namedtuple
from pathlib import PurePath, Path

from skyalchemy import exceptions
from skyalchemy.constants import SkyrimGameInfo, DEFAULT_LANGUAGE
from skyalchemy.plugins.bsa import BsaArchive
from skyalchemy.plugins.fields import parse_zstring, le_u32
from skyalchemy.utils import withlogger
from skyalchemy.utils.fsutils import find_path_ci

_HEADER = struct.Struct("<II")
_DIRECTORY_ENTRY = struct.Struct("<II")

# names live in .strings; descriptions in .dlstrings, where each string
# is preceded by its u32 length
STRINGS = "strings"
DLSTRINGS = "dlstrings"


def plugin_stem(plugin_name):
    return PurePath(plugin_name).stem


def get_strings_path(plugin_name, language=DEFAULT_LANGUAGE,
                     extension=STRINGS):
    """
    :return: path of the strings file relative to the Data folder, e.g.
        'strings/skyrim_english.strings'
    """
    return "{}/{}_{}.{}".format(SkyrimGameInfo.strings_dir,
                                 plugin_stem(plugin_name).lower(),
                                 language.lower(), extension)


def get_bsa_name(plugin_name):
    """
    :return: file name of the archive expected to hold the strings for
        `plugin_name`
    """
    stem = plugin_stem(plugin_name)
    if stem.lower() in SkyrimGameInfo.interface_plugins:
        return SkyrimGameInfo.interface_archive
    return stem + ".bsa"


StringsLocation = namedtuple("StringsLocation", "path bsa_entry")
StringsLocation.__doc__ = """Where a strings file lives. ``path`` is a
file on disk; when ``bsa_entry`` is set, ``path`` is the archive and
``bsa_entry`` the path of the file inside it."""


def find_strings_file(plugin_name, plugins_path, language=DEFAULT_LANGUAGE,
                      extension=STRINGS):
    """
    Tries to find a strings file for the given plugin, first as a loose
    file in the Data folder and then inside the plugin's archive.

    :param str plugin_name: file name of the plugin (no directories)
    :param str|Path plugins_path: the game's Data folder
    :param str extension: STRINGS or DLSTRINGS
    :rtype: StringsLocation|None
    """
    if "/" in plugin_name or "\\" in plugin_name:
        raise ValueError("plugin name must not contain a path: "
                         + plugin_name)

    strings_path = get_strings_path(plugin_name, language, extension)

    on_disk = find_path_ci(plugins_path, strings_path)
    if on_disk is not None and on_disk.is_file():
        return StringsLocation(str(on_disk), None)

    bsa_path = find_path_ci(plugins_path, get_bsa_name(plugin_name))
    if bsa_path is None or not bsa_path.is_file():
        return None

    if strings_path not in BsaArchive(bsa_path):
        return None

    return StringsLocation(str(bsa_path), strings_path)


@withlogger
class StringsTable:
    """
    The contents of one strings file. Data is only read the first
    time a string is requested.
    """

    def __init__(self, location=None, data=None, length_prefixed=False):
        """
        :param StringsLocation location: where to load the data from
        :param bytes data: the file's contents, if already in memory
        :param bool length_prefixed: True for .dlstrings files
        """
        if location is None and data is None:
            raise ValueError("either location or data is required")

        self.location = location
        self.length_prefixed = length_prefixed
        self._data = None
        self._directory = None

        if data is not None:
            self._load_directory(bytes(data))

    @classmethod
    def for_plugin(cls, plugin_name, plugins_path,
                   language=DEFAULT_LANGUAGE, extension=STRINGS):
        """
        :return: the StringsTable for `plugin_name`, or None if it has
            no such strings file
        """
        location = find_strings_file(plugin_name, plugins_path, language,
                                     extension)
        if location is None:
            return None
        return cls(location, length_prefixed=extension != STRINGS)

    @property
    def loaded(self):
        return self._directory is not None

    def load(self):
        if self.loaded:
            return

        path, entry = self.location
        if entry is None:
            data = Path(path).read_bytes()
        else:
            data = BsaArchive(path).extract(entry)

        self._load_directory(data)
        self.LOGGER << "Loaded {} strings from {}{}".format(
            len(self._directory), path, "" if entry is None else ":" + entry)

    def _load_directory(self, data):
        if len(data) < _HEADER.size:
            raise exceptions.StringsTableError(
                "strings file too short for its header")

        num_strings, strings_size = _HEADER.unpack_from(data)
        data_start = _HEADER.size + _DIRECTORY_ENTRY.size * num_strings

        if len(data) < data_start:
            raise exceptions.StringsTableError(
                "strings file too short for its directory of {} "
                "entries".format(num_strings))

        directory = dict(_DIRECTORY_ENTRY.iter_unpack(
            data[_HEADER.size:data_start]))

        strings = data[data_start:]
        if len(strings) != strings_size:
            raise exceptions.StringsTableError(
                "strings file holds {} bytes of string data, header "
                "says {}".format(len(strings), strings_size))

        self._directory = directory
        self._data = strings

    def __len__(self):
        self.load()
        return len(self._directory)

    def get(self, string_id):
        """
        :param int string_id:
        :return: the string, or None if `string_id` is not in the table
        """
        self.load()

        offset = self._directory.get(string_id)
        if offset is None or offset >= len(self._data):
            return None

        if self.length_prefixed:
            if offset + 4 > len(self._data):
                return None
            length = le_u32(self._data, offset)
            offset += 4
            return parse_zstring(self._data[offset:offset + length])

        end = self._data.find(b"\0", offset)
        if end < 0:
            end = len(self._data)
        return parse_zstring(self._data[offset:end])
