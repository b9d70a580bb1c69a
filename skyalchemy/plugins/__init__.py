"""
Extraction of ingredients and magic effects from plugin files
(.esm/.esp/.esl).

See https://en.uesp.net/wiki/Skyrim_Mod:Mod_File_Format
"""
from collections import namedtuple

from skyalchemy import exceptions
from skyalchemy.constants import PluginFlag, DEFAULT_LANGUAGE
from skyalchemy.plugins.fields import le_u32, parse_zstring
from skyalchemy.plugins.ingredient import parse_ingredient, \
    RECORD_TYPE as INGR
from skyalchemy.plugins.magic_effect import parse_magic_effect, \
    RECORD_TYPE as MGEF
from skyalchemy.plugins.records import Record, ParseError, iter_top_groups
from skyalchemy.plugins.strings_table import StringsTable, DLSTRINGS
from skyalchemy.skylog import newLogger, trace
from skyalchemy.types.formid import GlobalFormId, FORM_ID_MASK

_logger = newLogger(__name__)

HEADER_TYPE = b"TES4"


class PluginHeader(namedtuple("PluginHeader", "flags masters record_count")):
    """The parts of the TES4 file header that matter to us"""
    __slots__ = ()

    @property
    def is_master(self):
        return bool(self.flags & PluginFlag.MASTER)

    @property
    def is_localized(self):
        return bool(self.flags & PluginFlag.LOCALIZED)

    @property
    def is_light(self):
        return bool(self.flags & PluginFlag.LIGHT_MASTER)


def parse_header(buffer):
    """
    :return: (PluginHeader, offset of the first group)
    """
    record, offset = Record.parse(buffer, 0)
    if record.type != HEADER_TYPE:
        raise ParseError("file does not start with a TES4 header")

    hedr = record.find(b"HEDR")
    # HEDR: version (float), number of records and groups, next id
    record_count = le_u32(hedr.data, 4) if hedr is not None else 0

    masters = tuple(parse_zstring(sr.data)
                    for sr in record.find_all(b"MAST"))

    return PluginHeader(record.flags, masters, record_count), offset


class PluginContext:
    """
    What the record parsers need to know about the plugin being read:
    how its form ids map onto the load order, and where its localized
    strings are.
    """

    def __init__(self, plugin_name, header, load_order, strings=None,
                 dlstrings=None):
        """
        :param str plugin_name:
        :param PluginHeader header:
        :param skyalchemy.types.loadorder.LoadOrder load_order:
        :param StringsTable strings: required to resolve names when the
            plugin is localized
        :param StringsTable dlstrings: the same, for descriptions
        """
        self.plugin_name = plugin_name
        self.header = header
        self.strings = strings
        self.dlstrings = dlstrings

        # the top byte of a form id indexes the masters list; one past
        # the end refers to the plugin itself
        self._indexes = []
        for name in header.masters + (plugin_name,):
            index = load_order.index_of(name)
            self._indexes.append(index)

    def resolve(self, raw_form_id):
        """
        :param int raw_form_id: form id as stored in this plugin
        :rtype: GlobalFormId
        """
        master_index = raw_form_id >> 24
        # ids pointing past the masters belong to the plugin itself
        master_index = min(master_index, len(self._indexes) - 1)

        load_order_index = self._indexes[master_index]
        if load_order_index is None:
            owner = (self.header.masters + (self.plugin_name,))[master_index]
            raise ParseError("form id {:#010x} belongs to {}, which is not "
                             "in the load order".format(raw_form_id, owner))

        return GlobalFormId(load_order_index, raw_form_id & FORM_ID_MASK)

    def lstring(self, data):
        """
        Decode an lstring: a zstring, or for localized plugins the id
        of a string in the plugin's strings table.

        :return: the text, or None if it can't be found
        """
        return self._localized(data, self.strings)

    def dlstring(self, data):
        """Like lstring(), but looked up in the .dlstrings table"""
        return self._localized(data, self.dlstrings)

    def _localized(self, data, table):
        if not self.header.is_localized:
            return parse_zstring(data)

        if table is None:
            return None
        return table.get(le_u32(data))


def parse_plugin(buffer, plugin_name, load_order, plugins_path=None,
                 language=DEFAULT_LANGUAGE):
    """
    Read the ingredients and magic effects defined (or overridden) by
    a plugin.

    :param buffer: the plugin's contents (bytes or mmap)
    :param str plugin_name: the plugin's file name
    :param skyalchemy.types.loadorder.LoadOrder load_order: must
        contain the plugin and all of its masters
    :param str|Path plugins_path: the Data folder, for finding strings
        tables
    :param str language: strings table language
    :return: (list of Ingredients, list of MagicEffects)
    """
    try:
        header, offset = parse_header(buffer)

        strings = dlstrings = None
        if header.is_localized:
            if plugins_path is not None:
                strings = StringsTable.for_plugin(plugin_name, plugins_path,
                                                  language)
                dlstrings = StringsTable.for_plugin(
                    plugin_name, plugins_path, language, DLSTRINGS)
            if strings is None:
                _logger.warning("%s is localized but no %s strings file "
                                "was found; names will be missing",
                                plugin_name, language)
            if dlstrings is None:
                _logger.debug("%s has no %s dlstrings file; descriptions "
                              "will be empty", plugin_name, language)

        context = PluginContext(plugin_name, header, load_order, strings,
                                dlstrings)

        ingredients = []
        magic_effects = []
        for group in iter_top_groups(buffer, offset, (INGR, MGEF)):
            for record in group.records():
                if record.type == INGR:
                    ingredients.append(parse_ingredient(record, context))
                elif record.type == MGEF:
                    magic_effects.append(parse_magic_effect(record, context))
                trace(_logger, "%s: read %r", plugin_name, record)

    except ParseError as e:
        raise exceptions.PluginParseError(plugin_name, str(e)) from e
    except (exceptions.StringsTableError, exceptions.BsaError) as e:
        raise exceptions.PluginParseError(
            plugin_name, "could not read strings: {}".format(e)) from e

    return ingredients, magic_effects
