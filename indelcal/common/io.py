"""
File handling shared by the calibration loader and the command line tools
"""

__all__ = [
    "is_compressed",
    "open_input",
    "open_output",
    "read_json",
    "validate_input_path",
    "validate_output_path"
]

import contextlib
import json
import logging
import os
import sys

from pathlib import Path
from typing import Any, Callable, Iterator, TextIO
from Bio import bgzf

_LOG = logging.getLogger(__name__)


def is_compressed(file: str | Path) -> bool:
    """
    Determine if file is gzip (or bgzip) compressed, by checking for the gzip magic number
    ``1f 8b`` in the first two bytes.

    :param file: Path to a file.
    :return: True if file is compressed, False otherwise.
    """
    with open(file, "rb") as buffer:
        magic_number = buffer.read(2)
    return magic_number == b"\x1f\x8b"


@contextlib.contextmanager
def open_input(path: str | Path) -> Iterator[TextIO]:
    """
    Opens a text file for reading. Compressed files must be bgzipped (as written by bgzip or open_output).

    :param path: The path to the input file.
    :return: The handle to the text file.
    """
    handle: TextIO
    if is_compressed(path):
        handle = bgzf.open(path, "rt")
    else:
        handle = open(path, "r", encoding="utf-8")
    try:
        yield handle
    finally:
        handle.close()


@contextlib.contextmanager
def open_output(path: str | Path, mode: str = 'wt') -> Iterator[TextIO]:
    """
    Opens a file for writing. Output paths ending in .gz or .bgz are bgzip compressed.

    If the directory containing the file does not exist, it will be created.

    :param path: The path to the output file.
    :param mode: The mode with which to open the file. "xt" refuses to overwrite an existing file.
    :return: The handle to the text file where data should be written to.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    open_: Callable[..., TextIO]
    if {'.gz', '.bgz'} & set(output_path.suffixes):
        # bgzf has no exclusive-create mode
        if mode == "xt":
            if output_path.exists():
                _LOG.error(f"file '{path}' already exists")
                sys.exit(3)
            mode = "wt"
        open_ = bgzf.open
    else:
        open_ = open
    handle = open_(output_path, mode=mode)

    try:
        yield handle
    finally:
        handle.close()


def read_json(path: str | Path) -> Any:
    """
    Parse a (possibly compressed) JSON document.

    :param path: Path to the JSON file
    :return: The decoded document
    """
    with open_input(path) as handle:
        return json.load(handle)


def validate_input_path(path: str | Path):
    """
    Determine if the input path is a readable, non-empty file. Exits if not.

    Exit codes
    ----------
    5 - the input file does not exist or is not a file.
    7 - the input file is empty.
    9 - no read access to the file.

    :param path: Path to validate
    """
    path = Path(path)

    if not path.is_file():
        _LOG.error(f"Path '{path}' does not exist or not a file")
        sys.exit(5)
    if path.stat().st_size == 0:
        _LOG.error(f"File '{path}' is empty")
        sys.exit(7)
    if not os.access(path, os.R_OK):
        _LOG.error(f"cannot read from '{path}': access denied")
        sys.exit(9)


def validate_output_path(path: str | Path, is_file: bool = True, overwrite: bool = False):
    """
    Determine if the output path is valid. A file is valid if it does not yet exist (or overwrite is set),
    a directory is valid if we can write to it. Missing directories are created.

    Exit codes
    ----------
    3 - path is a file and already exists.
    11 - no write access to the directory.

    :param path: The path to validate.
    :param is_file: (optional) If set, validate the path assuming that it points to a file (default).
    :param overwrite: (optional) If set, an existing output file is acceptable
    """
    path = Path(path)
    if is_file:
        if path.is_file() and not overwrite:
            _LOG.error(f"file '{path}' already exists")
            sys.exit(3)
    else:
        if path.is_dir():
            if not os.access(path, os.W_OK):
                _LOG.error(f"cannot write to '{path}', access denied")
                sys.exit(11)
        else:
            path.mkdir(parents=True, exist_ok=True)
