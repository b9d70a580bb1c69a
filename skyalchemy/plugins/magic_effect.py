from skyalchemy.plugins.fields import parse_zstring, unpack
from skyalchemy.plugins.records import ParseError
from skyalchemy.skylog import newLogger
from skyalchemy.types.magiceffect import MagicEffect

RECORD_TYPE = b"MGEF"

# only the leading flags and base cost of DATA are needed
_DATA = "<If"

_logger = newLogger(__name__)


def parse_magic_effect(record, context):
    """
    Build a MagicEffect from an MGEF record.

    See https://en.uesp.net/wiki/Skyrim_Mod:Mod_File_Format/MGEF

    :param skyalchemy.plugins.records.Record record:
    :param skyalchemy.plugins.PluginContext context:
    :rtype: MagicEffect
    """
    assert record.type == RECORD_TYPE

    global_form_id = context.resolve(record.form_id)

    edid = record.find(b"EDID")
    if edid is None:
        raise ParseError("magic effect {:#010x} is missing its editor "
                         "ID".format(record.form_id))
    editor_id = parse_zstring(edid.data)

    full = record.find(b"FULL")
    name = context.lstring(full.data) if full is not None else None

    dnam = record.find(b"DNAM")
    if dnam is None:
        _logger.debug("Magic effect %s is missing a description", editor_id)
        description = ""
    else:
        description = context.dlstring(dnam.data) or ""

    data = record.find(b"DATA")
    if data is None:
        raise ParseError("magic effect {} is missing DATA".format(editor_id))
    flags, base_cost = unpack(_DATA, data.data, "DATA")

    return MagicEffect(global_form_id, editor_id, name, description, flags,
                       base_cost)
