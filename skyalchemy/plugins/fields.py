"""
Decoders for the data types stored inside subrecords.

See https://en.uesp.net/wiki/Skyrim_Mod:File_Format_Conventions#Data_Types
"""
import struct

from skyalchemy.plugins.records import ParseError

# plugins store text in the Windows ANSI codepage
ENCODING = "cp1252"

_U32 = struct.Struct("<I")


def parse_string(data):
    # a handful of cp1252 code points are undefined; don't let one bad
    # byte in a name sink the whole plugin
    return bytes(data).decode(ENCODING, errors="replace")


def parse_zstring(data):
    """A null-terminated string; anything after the first null is
    ignored."""
    data = bytes(data)
    end = data.find(b"\0")
    if end >= 0:
        data = data[:end]
    return parse_string(data)


def le_u32(data, offset=0):
    if len(data) < offset + _U32.size:
        raise ParseError("need 4 bytes for an integer, have {}".format(
            len(data) - offset))
    return _U32.unpack_from(data, offset)[0]


def unpack(fmt, data, what):
    """struct.unpack_from with a ParseError naming `what` when the data
    is too short"""
    s = struct.Struct(fmt)
    if len(data) < s.size:
        raise ParseError("{} needs {} bytes, has {}".format(what, s.size,
                                                            len(data)))
    return s.unpack_from(data)
