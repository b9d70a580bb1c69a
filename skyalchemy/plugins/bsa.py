"""
Read-only access to Bethesda .bsa archives (versions 103, 104 and 105),
enough to pull single files such as strings tables out of them.

See https://en.uesp.net/wiki/Skyrim_Mod:Archive_File_Format
"""
import struct
import zlib
from collections import namedtuple

import lz4.frame

from skyalchemy import exceptions
from skyalchemy.utils import withlogger

MAGIC = b"BSA\0"

# Oblivion, Skyrim (LE), Skyrim Special Edition
SUPPORTED_VERSIONS = (103, 104, 105)

HEADER = struct.Struct("<4sIIIIIIIHH")

# hash, file count, offset
FOLDER_RECORD_V104 = struct.Struct("<QII")
# hash, file count, padding, offset
FOLDER_RECORD_V105 = struct.Struct("<QIIQ")

# hash, size, offset
FILE_RECORD = struct.Struct("<QII")

_U32 = struct.Struct("<I")


class ArchiveFlag:
    INCLUDE_DIRECTORY_NAMES = 0x001
    INCLUDE_FILE_NAMES = 0x002
    COMPRESSED = 0x004
    EMBED_FILE_NAMES = 0x100

# set in a file record's size when its compression differs from the
# archive default
SIZE_COMPRESSION_TOGGLE = 0x40000000
SIZE_MASK = 0x3FFFFFFF


BsaFile = namedtuple("BsaFile", "folder name size offset compressed")
BsaFile.__doc__ = """A file stored in an archive. ``folder`` uses '/'
separators and, like ``name``, is lowercase."""


def _normalize(path):
    return path.replace("\\", "/").strip("/").lower()


@withlogger
class BsaArchive:

    def __init__(self, path):
        """
        Read the directory of the archive at `path`. File contents are
        only read on extract().

        :param str|Path path:
        """
        self.path = str(path)
        self.version = None
        self.flags = 0
        self._folders = {}

        try:
            with open(self.path, "rb") as f:
                self._read_directory(f)
        except OSError as e:
            raise exceptions.BsaError(
                "Could not open archive '{}': {}".format(self.path, e)) from e
        except (struct.error, IndexError) as e:
            raise exceptions.BsaError(
                "Archive '{}' is truncated: {}".format(self.path, e)) from e

        self.LOGGER << "Read {} folders from {}".format(len(self._folders),
                                                        self.path)

    def _read_directory(self, f):
        (magic, version, offset, flags, folder_count, file_count,
         _folder_names_len, _file_names_len, _file_flags,
         _padding) = HEADER.unpack(f.read(HEADER.size))

        if magic != MAGIC:
            raise exceptions.BsaError(
                "'{}' is not a BSA archive".format(self.path))
        if version not in SUPPORTED_VERSIONS:
            raise exceptions.BsaError(
                "Unsupported BSA version {} in '{}'".format(version,
                                                            self.path))
        if not flags & ArchiveFlag.INCLUDE_DIRECTORY_NAMES \
                or not flags & ArchiveFlag.INCLUDE_FILE_NAMES:
            raise exceptions.BsaError(
                "Archive '{}' does not store file names".format(self.path))

        self.version = version
        self.flags = flags

        f.seek(offset)
        folder_struct = FOLDER_RECORD_V105 if version == 105 \
            else FOLDER_RECORD_V104
        counts = [folder_struct.unpack(f.read(folder_struct.size))[1]
                  for _ in range(folder_count)]

        # a block per folder: its name, then its file records
        records = []
        for count in counts:
            name_len = f.read(1)[0]
            folder = _normalize(
                f.read(name_len).rstrip(b"\0").decode("cp1252"))
            for _ in range(count):
                _hash, size, file_offset = FILE_RECORD.unpack(
                    f.read(FILE_RECORD.size))
                records.append((folder, size, file_offset))

        if len(records) != file_count:
            raise exceptions.BsaError(
                "Archive '{}' lists {} files but contains {}".format(
                    self.path, file_count, len(records)))

        # then every file name, null terminated, in record order
        default_compressed = bool(flags & ArchiveFlag.COMPRESSED)
        for folder, size, file_offset in records:
            name = _read_cstring(f).lower()
            compressed = default_compressed != bool(
                size & SIZE_COMPRESSION_TOGGLE)
            self._folders.setdefault(folder, {})[name] = BsaFile(
                folder, name, size & SIZE_MASK, file_offset, compressed)

    ##=============================================
    ## Lookup
    ##=============================================

    def folders(self):
        return list(self._folders)

    def files(self, folder):
        """:rtype: list[BsaFile]"""
        return list(self._folders.get(_normalize(folder), {}).values())

    def find(self, path):
        """
        Look up a file by its path within the archive, ignoring case.

        :param str path: e.g. 'strings/skyrim_english.strings'
        :rtype: BsaFile|None
        """
        folder, _, name = _normalize(path).rpartition("/")
        return self._folders.get(folder, {}).get(name)

    def __contains__(self, path):
        return self.find(path) is not None

    ##=============================================
    ## Extraction
    ##=============================================

    def extract(self, entry):
        """
        Read the contents of a file in the archive.

        :param BsaFile|str entry: a BsaFile from this archive or a path
        :rtype: bytes
        """
        if isinstance(entry, str):
            found = self.find(entry)
            if found is None:
                raise exceptions.BsaError("'{}' not found in '{}'".format(
                    entry, self.path))
            entry = found

        with open(self.path, "rb") as f:
            f.seek(entry.offset)
            data = f.read(entry.size)

        if len(data) != entry.size:
            raise exceptions.BsaError(
                "'{}/{}' in '{}' is truncated".format(entry.folder,
                                                      entry.name, self.path))

        if self.flags & ArchiveFlag.EMBED_FILE_NAMES:
            # a length-prefixed copy of the full path comes first
            if not data or len(data) < 1 + data[0]:
                raise exceptions.BsaError(
                    "'{}/{}' in '{}' has a truncated embedded "
                    "name".format(entry.folder, entry.name, self.path))
            data = data[1 + data[0]:]

        if entry.compressed:
            data = self._decompress(entry, data)

        return data

    def _decompress(self, entry, data):
        if len(data) < _U32.size:
            raise exceptions.BsaError(
                "'{}/{}' in '{}' is too short to be "
                "compressed".format(entry.folder, entry.name, self.path))
        original_size = _U32.unpack_from(data)[0]
        try:
            if self.version == 105:
                data = lz4.frame.decompress(data[_U32.size:])
            else:
                data = zlib.decompress(data[_U32.size:])
        except (RuntimeError, zlib.error) as e:
            raise exceptions.BsaError(
                "Could not decompress '{}/{}' in '{}': {}".format(
                    entry.folder, entry.name, self.path, e)) from e

        if len(data) != original_size:
            raise exceptions.BsaError(
                "'{}/{}' in '{}' decompressed to {} bytes, expected "
                "{}".format(entry.folder, entry.name, self.path, len(data),
                            original_size))
        return data


def _read_cstring(f):
    chars = bytearray()
    while True:
        c = f.read(1)
        if not c:
            raise struct.error("unterminated file name")
        if c == b"\0":
            return chars.decode("cp1252")
        chars += c
