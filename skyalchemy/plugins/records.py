"""
Low-level reading of the Skyrim plugin container format: records,
their subrecords, and the groups that hold them.

See https://en.uesp.net/wiki/Skyrim_Mod:Mod_File_Format
"""
import struct
import zlib
from collections import namedtuple

from skyalchemy.constants import RecordFlag

GROUP_TYPE = b"GRUP"

# type, data size, flags, form id, version control info, version, unknown
RECORD_HEADER = struct.Struct("<4sIIIIHH")

# 'GRUP', size including this header, label, group type, stamp,
# version control, unknown
GROUP_HEADER = struct.Struct("<4sI4siHHI")

SUBRECORD_HEADER = struct.Struct("<4sH")

_U32 = struct.Struct("<I")

# a subrecord carrying the real size of the subrecord that follows it
_XXXX = b"XXXX"


class ParseError(ValueError):
    """Raised for truncated or inconsistent plugin data. Callers wrap
    this with the name of the plugin being read."""


Subrecord = namedtuple("Subrecord", "type data")


def _check_length(buffer, offset, needed, what):
    if offset + needed > len(buffer):
        raise ParseError("truncated {} at offset {:#x}: need {} bytes, "
                         "have {}".format(what, offset, needed,
                                          len(buffer) - offset))


def parse_subrecords(data):
    """
    Split a record's data into its subrecords.

    :param bytes data:
    :rtype: list[Subrecord]
    """
    subrecords = []
    offset = 0
    next_size = None

    while offset < len(data):
        _check_length(data, offset, SUBRECORD_HEADER.size,
                      "subrecord header")
        sr_type, size = SUBRECORD_HEADER.unpack_from(data, offset)
        offset += SUBRECORD_HEADER.size

        if next_size is not None:
            size, next_size = next_size, None

        _check_length(data, offset, size, "subrecord " + _label(sr_type))
        sr_data = bytes(data[offset:offset + size])
        offset += size

        if sr_type == _XXXX:
            next_size = _U32.unpack_from(sr_data)[0]
            continue

        subrecords.append(Subrecord(bytes(sr_type), sr_data))

    return subrecords


class Record:
    __slots__ = ('type', 'flags', 'form_id', 'subrecords')

    def __init__(self, type_, flags, form_id, subrecords):
        """
        :param bytes type_: four character record type, e.g. b'INGR'
        :param int flags:
        :param int form_id: the raw form id including the master byte
        :param list[Subrecord] subrecords:
        """
        self.type = type_
        self.flags = flags
        self.form_id = form_id
        self.subrecords = subrecords

    @classmethod
    def parse(cls, buffer, offset=0):
        """
        Read a record starting at `offset`.

        :return: (Record, offset just past the record)
        """
        _check_length(buffer, offset, RECORD_HEADER.size, "record header")
        (type_, size, flags, form_id,
         _vc, _version, _unknown) = RECORD_HEADER.unpack_from(buffer, offset)
        offset += RECORD_HEADER.size

        _check_length(buffer, offset, size, "record " + _label(type_))
        data = buffer[offset:offset + size]
        offset += size

        if flags & RecordFlag.COMPRESSED:
            data = _decompress(data, type_)

        return cls(bytes(type_), flags, form_id,
                   parse_subrecords(data)), offset

    def find(self, sr_type):
        """Return the first subrecord of the given type, or None"""
        for sr in self.subrecords:
            if sr.type == sr_type:
                return sr
        return None

    def find_all(self, sr_type):
        return [sr for sr in self.subrecords if sr.type == sr_type]

    def __repr__(self):
        return "Record({}, {:#010x}, {} subrecords)".format(
            _label(self.type), self.form_id, len(self.subrecords))


def _decompress(data, type_):
    _check_length(data, 0, _U32.size, "compressed record size")
    expected = _U32.unpack_from(data)[0]
    try:
        result = zlib.decompress(bytes(data[_U32.size:]))
    except zlib.error as e:
        raise ParseError("could not decompress record {}: {}".format(
            _label(type_), e)) from e
    if len(result) != expected:
        raise ParseError("record {} decompressed to {} bytes, expected "
                         "{}".format(_label(type_), len(result), expected))
    return result


class Group:
    __slots__ = ('label', 'group_type', 'children')

    def __init__(self, label, group_type, children):
        """
        :param bytes label: for top-level groups, the record type held
        :param int group_type: 0 for top-level groups
        :param list[Record|Group] children:
        """
        self.label = label
        self.group_type = group_type
        self.children = children

    @staticmethod
    def read_header(buffer, offset):
        """
        :return: (label, group type, offset of the contents, offset
            just past the group)
        """
        _check_length(buffer, offset, GROUP_HEADER.size, "group header")
        (tag, size, label, group_type,
         _stamp, _vc, _unknown) = GROUP_HEADER.unpack_from(buffer, offset)
        if tag != GROUP_TYPE:
            raise ParseError("expected GRUP at offset {:#x}, found "
                             "{}".format(offset, _label(tag)))
        if size < GROUP_HEADER.size:
            raise ParseError("group at offset {:#x} has invalid size "
                             "{}".format(offset, size))
        end = offset + size
        _check_length(buffer, offset, size, "group " + _label(label))
        return bytes(label), group_type, offset + GROUP_HEADER.size, end

    @classmethod
    def parse(cls, buffer, offset=0):
        """
        Read a group, and every record and group nested in it.

        :return: (Group, offset just past the group)
        """
        label, group_type, pos, end = cls.read_header(buffer, offset)

        children = []
        while pos < end:
            if bytes(buffer[pos:pos + 4]) == GROUP_TYPE:
                child, pos = cls.parse(buffer, pos)
            else:
                child, pos = Record.parse(buffer, pos)
            children.append(child)

        if pos != end:
            raise ParseError("contents of group {} overrun its size".format(
                _label(label)))

        return cls(label, group_type, children), end

    def records(self):
        """Yield every record in this group and its subgroups"""
        for child in self.children:
            if isinstance(child, Group):
                yield from child.records()
            else:
                yield child


def iter_top_groups(buffer, offset, wanted):
    """
    Walk the top-level groups following the file header, fully parsing
    only those whose label is in `wanted`; the rest are skipped over by
    size.

    :param buffer: the whole plugin
    :param int offset: where the first group starts
    :param wanted: collection of labels, e.g. {b'INGR', b'MGEF'}
    :return: generator of Groups
    """
    while offset < len(buffer):
        label, _, _, end = Group.read_header(buffer, offset)
        if label in wanted:
            group, _ = Group.parse(buffer, offset)
            yield group
        offset = end


def _label(type_):
    return bytes(type_).decode("cp1252", errors="replace")
