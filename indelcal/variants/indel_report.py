"""
Descriptions of the indel calls handed to the error model. The caller summarises each candidate indel by its type
and its repeat context: the length of the repeat unit, and how many copies of that unit the reference and the
indel allele each carry.
"""

__all__ = [
    "IndelType",
    "IndelReportInfo",
    "read_indel_reports"
]

import logging

from enum import Enum
from typing import Iterator, TextIO

from ..common import INDEL_TYPE_ALIASES, REPORT_REQUIRED_COLUMNS, REPORT_OPTIONAL_COLUMNS

_LOG = logging.getLogger(__name__)


class IndelType(Enum):
    """
    INSERT and DELETE are simple indels. Everything else (breakpoints, swaps) is OTHER.
    """
    INSERT = "INSERT"
    DELETE = "DELETE"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, value: str) -> "IndelType":
        """
        Parse a type label, case-insensitively. Unrecognised labels are OTHER.

        :param value: A label such as 'I', 'del' or 'INSERTION'
        :return: The matching IndelType
        """
        return cls(INDEL_TYPE_ALIASES.get(value.strip().upper(), "OTHER"))

    @property
    def is_simple(self) -> bool:
        return self in (IndelType.INSERT, IndelType.DELETE)


class IndelReportInfo:
    """
    Read-only summary of an indel call, as seen by the error model.

    :param indel_type: Insertion, deletion or other (complex) event
    :param repeat_unit_length: Length of the repeat unit spanning the indel. 0 means no repeat context.
    :param ref_repeat_count: Number of copies of the repeat unit in the reference allele
    :param indel_repeat_count: Number of copies of the repeat unit in the indel allele
    :param observed_homopolymer_length: Longest homopolymer run observed around the indel
    :param description: Free text used to identify this call in error messages
    """

    __slots__ = ("indel_type", "repeat_unit_length", "ref_repeat_count", "indel_repeat_count",
                 "observed_homopolymer_length", "description")

    def __init__(self,
                 indel_type: IndelType | str,
                 repeat_unit_length: int = 0,
                 ref_repeat_count: int = 0,
                 indel_repeat_count: int = 0,
                 observed_homopolymer_length: int = 0,
                 description: str = ""):

        if isinstance(indel_type, str):
            indel_type = IndelType.from_string(indel_type)

        for name, value in (("repeat_unit_length", repeat_unit_length),
                            ("ref_repeat_count", ref_repeat_count),
                            ("indel_repeat_count", indel_repeat_count),
                            ("observed_homopolymer_length", observed_homopolymer_length)):
            if value < 0:
                raise ValueError(f"{name} must be non-negative (got {value})")

        self.indel_type = indel_type
        self.repeat_unit_length = int(repeat_unit_length)
        self.ref_repeat_count = int(ref_repeat_count)
        self.indel_repeat_count = int(indel_repeat_count)
        self.observed_homopolymer_length = int(observed_homopolymer_length)
        self.description = description

    def __eq__(self, other):
        if not isinstance(other, IndelReportInfo):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    def __repr__(self):
        return (f'{self.__class__.__name__}({self.indel_type.value}, unit={self.repeat_unit_length}, '
                f'ref={self.ref_repeat_count}, indel={self.indel_repeat_count}, desc={self.description!r})')


def read_indel_reports(handle: TextIO) -> Iterator[IndelReportInfo]:
    """
    Parse a tab-separated table of indel reports. The first non-comment line is the header, which must name
    the columns 'type', 'repeat_unit_length', 'ref_repeat_count' and 'indel_repeat_count', and may also name
    'observed_homopolymer_length' and 'description'. Blank lines and lines starting with '#' are skipped.

    :param handle: An open text handle
    :return: A generator of IndelReportInfo objects
    """
    header = None
    for line_number, line in enumerate(handle, start=1):
        line = line.rstrip("\r\n")
        if not line.strip() or line.startswith("#"):
            continue

        fields = line.split("\t")
        if header is None:
            header = [field.strip() for field in fields]
            missing = [column for column in REPORT_REQUIRED_COLUMNS if column not in header]
            if missing:
                raise ValueError(f"Report table header is missing column(s): {', '.join(missing)}")
            ignored = set(header) - set(REPORT_REQUIRED_COLUMNS) - set(REPORT_OPTIONAL_COLUMNS)
            if ignored:
                _LOG.debug(f"Ignoring report columns: {', '.join(sorted(ignored))}")
            continue

        if len(fields) != len(header):
            raise ValueError(f"Line {line_number}: expected {len(header)} fields, found {len(fields)}")

        record = dict(zip(header, fields))
        try:
            report = IndelReportInfo(
                indel_type=record['type'],
                repeat_unit_length=int(record['repeat_unit_length']),
                ref_repeat_count=int(record['ref_repeat_count']),
                indel_repeat_count=int(record['indel_repeat_count']),
                observed_homopolymer_length=int(record.get('observed_homopolymer_length') or 0),
                description=record.get('description') or f"line_{line_number}"
            )
        except ValueError as exc:
            raise ValueError(f"Line {line_number}: {exc}") from exc
        yield report

    if header is None:
        _LOG.warning("Report table was empty")
