import struct

from skyalchemy.plugins.fields import le_u32, parse_zstring, unpack
from skyalchemy.plugins.records import ParseError
from skyalchemy.types.ingredient import Ingredient, IngredientEffect

RECORD_TYPE = b"INGR"

# magnitude, area of effect, duration
_EFIT = "<fII"


def parse_ingredient(record, context):
    """
    Build an Ingredient from an INGR record.

    See https://en.uesp.net/wiki/Skyrim_Mod:Mod_File_Format/INGR

    :param skyalchemy.plugins.records.Record record:
    :param skyalchemy.plugins.PluginContext context:
    :rtype: Ingredient
    """
    assert record.type == RECORD_TYPE

    global_form_id = context.resolve(record.form_id)

    edid = record.find(b"EDID")
    if edid is None:
        raise ParseError("ingredient {:#010x} is missing its editor "
                         "ID".format(record.form_id))
    editor_id = parse_zstring(edid.data)

    full = record.find(b"FULL")
    name = context.lstring(full.data) if full is not None else None

    effects = []
    current_effect_id = None

    # ENIT is a required field that appears just before the effects we
    # care about
    subrecords = iter(record.subrecords)
    for sr in subrecords:
        if sr.type == b"ENIT":
            break

    for sr in subrecords:
        if sr.type == b"EFID":
            current_effect_id = le_u32(sr.data)
        elif sr.type == b"EFIT":
            if current_effect_id is None:
                raise ParseError("{}: EFIT appeared before EFID".format(
                    editor_id))
            try:
                magnitude, _area, duration = unpack(_EFIT, sr.data,
                                                    "EFIT")
            except struct.error as e:
                raise ParseError("error parsing ingredient effects: "
                                 "{}".format(e)) from e
            effects.append(IngredientEffect(
                context.resolve(current_effect_id), magnitude, duration))
            current_effect_id = None

    # sorted to make later comparisons cheaper
    effects.sort(key=lambda e: e.global_form_id)

    return Ingredient(global_form_id, editor_id, name, effects)
