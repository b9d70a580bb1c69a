from functools import singledispatch
from pathlib import Path

import os
from os.path import join as _join

from skyalchemy.exceptions import FileAccessError
from skyalchemy.utils.safewrite import SafeWriter as _safewriter

__all__ = ["join_path", "find_path_ci", "read_lines", "open_atomic"]


def join_path(base_path, *path_parts, as_path_object=False):
    """

    :param str base_path: first part of the path
    :param str path_parts: any number of additional path pieces to join
    :param bool as_path_object: if True, return the result as a
        pathlib.Path object; otherwise, it is returned as a string
    :return:
    """

    if as_path_object:
        return Path(base_path, *path_parts)

    return _join(base_path, *path_parts)


def find_path_ci(base_path, relpath):
    """
    Locate `relpath` beneath `base_path` ignoring case in every
    component, the way Windows would. Game files are frequently named
    with inconsistent capitalization ("Strings" vs "strings") so an
    exact lookup is not enough on a case-sensitive filesystem.

    :param str|Path base_path: existing directory; its own case is
        taken as-is
    :param str relpath: '/'-separated path relative to `base_path`
    :return: the Path as it exists on disk, or None if not found
    """
    current = Path(base_path)

    for part in (p for p in relpath.split("/") if p):
        exact = current / part
        if exact.exists():
            current = exact
            continue

        if not current.is_dir():
            return None

        lpart = part.lower()
        for child in current.iterdir():
            if child.name.lower() == lpart:
                current = child
                break
        else:
            return None

    return current


def read_lines(path, encoding="utf-8"):
    """
    Read a text file containing one entry per line.

    :param str|Path path:
    :return: set of the stripped, non-empty lines
    """
    try:
        with open(path, encoding=encoding) as f:
            return {line.strip() for line in f if line.strip()}
    except OSError as e:
        raise FileAccessError(path, "Could not read file '{file}': "
                              + (e.strerror or str(e))) from e


@singledispatch
def open_atomic(file_name, dest_dir=None, as_bytes=False):
    """
    Obtain a context manager for for writing to a file safely and
    atomically. If something goes wrong during the write, nothing will
    have been overwritten. Can be used just like the built in open(f...)

    This method has two forms:

        * ``open_atomic(file_name, dest_dir, as_bytes=False)``
        * ``open_atomic(dest_file_path, as_bytes=False)``

    In the first form, `file_name` and `dest_dir` are both strings. If
    dest_dir is None, file_name will be assumed to be entire path to
    the file to open.

    In the second, `dest_file_path` is a Path object.

    In both cases, as_bytes is a boolean value

    :type file_name: str
    :type dest_dir: str
    :type as_bytes: bool
    """
    if dest_dir is None:
        dest_dir = os.path.dirname(file_name) or os.curdir
        file_name = os.path.basename(file_name)

    return _safewriter(file_name, dest_dir, as_bytes)

@open_atomic.register(Path)
def _ofsw(dest_file_path, as_bytes=False):
    """

    :param Path dest_file_path:
    :param bool as_bytes:
    """
    return _safewriter(dest_file_path.name,
                       str(dest_file_path.parent), as_bytes)
