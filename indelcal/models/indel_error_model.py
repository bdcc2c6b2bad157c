"""
The indel error model. For an indel call it estimates the probability that the call is an artifact of
sequencing or alignment, and the probability that a true indel allele was masked as reference. Both depend on
the repeat context of the indel: polymerase slippage makes indel errors far more common in long homopolymers
and short tandem repeats (STRs), so the model stores one pair of error rates for each combination of repeat unit
length and tract length.

The table is loaded once from a calibration document and is read-only afterwards, so a loaded model can be shared
between threads.
"""

__all__ = [
    "ErrorPair",
    "IndelErrorModel"
]

import logging

from pathlib import Path
from typing import NamedTuple

import numpy as np

from ..common import (MAX_MOTIF_KEY, MAX_TRACT_KEY, MODEL_KEY, INDEL_MODEL_TYPE,
                      read_json, validate_input_path)
from ..variants import IndelType, IndelReportInfo
from .errors import ModelConsistencyError, TractLengthOutOfRangeError, UnknownIndelTypeError
from .serialized_model import SerializedModel

_LOG = logging.getLogger(__name__)


class ErrorPair(NamedTuple):
    """Probabilities of an insertion error and of a deletion error in one repeat context"""
    insertion: float
    deletion: float


class IndelErrorModel(SerializedModel):
    """
    Length-indexed indel error probabilities.

    Entry [u, t] of the table holds the (insertion, deletion) error pair for a repeat unit of length u + 1 in a
    tract of total length t + 1. Entry [0, 0] is the baseline, used for indels outside any repeat.

    :param max_motif_length: Largest repeat unit length with a row in the table.
    :param max_tract_length: Largest tract length with a column in the table.
        Both default to 0, which gives an empty model to be filled by `load`.
    """
    _model_type = INDEL_MODEL_TYPE

    def __init__(self, max_motif_length: int = 0, max_tract_length: int = 0):
        super().__init__()
        self.max_motif_length = max_motif_length
        self.max_tract_length = max_tract_length
        self.table = np.zeros((max_motif_length, max_tract_length, 2), dtype=np.float64)
        self.is_loaded = False

    def set_entry(self, unit_index: int, tract_index: int, pair: ErrorPair | tuple[float, float]):
        """
        Store the error pair for the given (0-based) indices, replacing any previous value.
        """
        self.table[unit_index, tract_index] = pair

    def entry(self, unit_index: int, tract_index: int) -> ErrorPair:
        """
        Fetch the error pair at the given (0-based) indices. Callers are responsible for keeping the indices
        inside the table.
        """
        insertion, deletion = self.table[unit_index, tract_index]
        return ErrorPair(float(insertion), float(deletion))

    @classmethod
    def from_json(cls, path: str | Path) -> "IndelErrorModel":
        """
        Build a model from a calibration file. The file may be bgzip compressed.

        :param path: Path to the calibration JSON
        :return: The loaded, read-only model
        """
        validate_input_path(path)
        _LOG.debug(f"Reading indel error model from {path}")
        try:
            document = read_json(path)
        except ValueError as exc:
            raise ModelConsistencyError(f"'{path}' is not a valid JSON document: {exc}") from exc

        model = cls()
        model.load(document)
        return model

    def load(self, document: dict):
        """
        Populate the table from a decoded calibration document.

        The document holds "MaxMotifLength", "MaxTractLength" and "Model". "Model" has one row per repeat unit
        length and, in each row, one [deletion, insertion] pair per tract length. Pairs are stored as
        (insertion, deletion), so the order of each leaf is swapped on the way in.

        The model must contain exactly MaxMotifLength rows, and its last row at least MaxTractLength entries.

        :param document: The decoded JSON calibration document
        """
        if self.is_loaded:
            raise ValueError("Indel error model is already loaded")

        header = self.read_header(document)

        try:
            max_motif_length = int(document[MAX_MOTIF_KEY])
            max_tract_length = int(document[MAX_TRACT_KEY])
            rows = document[MODEL_KEY]
        except KeyError as exc:
            raise ModelConsistencyError(f"Calibration document is missing {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise ModelConsistencyError(f"Model dimensions must be integers: {exc}") from exc

        if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
            raise ModelConsistencyError(f"'{MODEL_KEY}' must be an array of arrays")

        # Extents reached by a full sweep of the table
        last_unit = len(rows)
        last_tract = len(rows[-1]) if rows else 0
        if last_unit != max_motif_length:
            raise ModelConsistencyError(
                f"Unexpected motif length in indel model: found {last_unit} rows, "
                f"{MAX_MOTIF_KEY} is {max_motif_length}"
            )
        if last_tract < max_tract_length:
            raise ModelConsistencyError(
                f"Unexpected tract length in indel model: last row has {last_tract} entries, "
                f"{MAX_TRACT_KEY} is {max_tract_length}"
            )

        pairs = [[self._parse_leaf(unit, tract, leaf) for tract, leaf in enumerate(row)]
                 for unit, row in enumerate(rows)]

        n_columns = max([max_tract_length] + [len(row) for row in rows])
        if n_columns < 2 * max_motif_length:
            _LOG.warning(f"Indel model tracts stop at {n_columns} bases, so indels in repeats with a unit longer "
                         f"than {n_columns // 2} bases cannot be estimated")

        self.max_motif_length = max_motif_length
        self.max_tract_length = max_tract_length
        self.table = np.zeros((max_motif_length, n_columns, 2), dtype=np.float64)

        for unit, row in enumerate(pairs):
            for tract, (first, second) in enumerate(row):
                self.set_entry(unit, tract, ErrorPair(second, first))

        self._check_short_tracts()

        self.set_header(header)
        self.table.flags.writeable = False
        self.is_loaded = True
        _LOG.info(f"Loaded indel error model {self.describe()}: "
                  f"motif lengths 1-{self.max_motif_length}, tract lengths 1-{self.max_tract_length}")

    @staticmethod
    def _parse_leaf(unit: int, tract: int, leaf) -> tuple[float, float]:
        if not isinstance(leaf, list) or len(leaf) != 2:
            raise ModelConsistencyError(f"Model entry [{unit}][{tract}] must be a pair of numbers, found {leaf!r}")
        try:
            first, second = float(leaf[0]), float(leaf[1])
        except (TypeError, ValueError) as exc:
            raise ModelConsistencyError(f"Model entry [{unit}][{tract}] is not numeric: {leaf!r}") from exc
        if not (0.0 <= first <= 1.0 and 0.0 <= second <= 1.0):
            _LOG.warning(f"Model entry [{unit}][{tract}] is not a probability: {leaf!r}")
        return first, second

    def _check_short_tracts(self):
        """
        Tracts shorter than two copies of the repeat unit are not STRs, and the calibration should leave them
        at zero. Lookups never reach these cells, so nonzero values only earn a warning.
        """
        suspicious = 0
        for unit in range(1, self.table.shape[0]):
            min_tract = 2 * (unit + 1)
            suspicious += int(np.count_nonzero(self.table[unit, :min_tract - 1].any(axis=1)))
        if suspicious:
            _LOG.warning(f"{suspicious} indel model entries have a nonzero error probability for a tract length "
                         f"below twice the repeat unit size")

    def baseline(self, options, report: IndelReportInfo) -> ErrorPair:
        """
        The baseline error pair, regardless of the repeat context of the report.

        :param options: Caller options (unused, kept for a uniform query signature)
        :param report: The indel report (unused)
        :return: entry [0, 0] of the table
        """
        return self.entry(0, 0)

    def estimate(self,
                 options,
                 report: IndelReportInfo,
                 use_length_dependence: bool = False) -> tuple[float, float]:
        """
        Estimate the error probabilities for an indel call.

        :param options: Caller options. Only `ref_error_factor` is used, which scales the reference error.
        :param report: The indel report describing the call and its repeat context
        :param use_length_dependence: If set, the table lookup is raised to the power of the number of repeat
            units inserted or deleted, so larger indels are less likely to be errors.
        :return: (indel_error_prob, ref_error_prob). The first is the probability that the indel call is an
            error, the second the probability that a true indel allele was read as reference.
        """
        is_simple_indel = report.indel_type.is_simple

        repeat_unit = min(max(report.repeat_unit_length, 1), self.max_motif_length)
        ref_tract = min(repeat_unit * max(report.ref_repeat_count, 1), self.max_tract_length)
        indel_tract = min(repeat_unit * max(report.indel_repeat_count, 1), self.max_tract_length)

        indel_size = 1
        if use_length_dependence:
            indel_size = abs(report.ref_repeat_count - report.indel_repeat_count)

        min_tract_length = self.get_min_tract_length(report)
        if repeat_unit == 1:
            min_tract_length = 1

        base = self.entry(0, 0)

        if not is_simple_indel:
            # Breakpoints and swaps get the worst baseline rate. No per-length estimate exists for these yet.
            indel_error_prob = max(base.insertion, base.deletion)
            return indel_error_prob, indel_error_prob

        # Tracts too short to be a repeat use the shortest calibrated tract for this unit
        ref_query_length = max(min_tract_length, ref_tract)
        indel_query_length = max(min_tract_length, indel_tract)

        if report.repeat_unit_length <= self.max_motif_length:
            if min_tract_length > self.table.shape[1]:
                _LOG.error(f"Tract length {min_tract_length} is outside the indel model: {report.description}")
                raise TractLengthOutOfRangeError(report.description, min_tract_length, self.table.shape[1])
            ref_query = self.entry(repeat_unit - 1, ref_query_length - 1)
            indel_query = self.entry(repeat_unit - 1, indel_query_length - 1)
            if report.indel_type == IndelType.INSERT:
                indel_error_prob = max(base.insertion, ref_query.insertion ** indel_size)
                ref_error_prob = options.ref_error_factor * max(base.deletion, indel_query.deletion ** indel_size)
            elif report.indel_type == IndelType.DELETE:
                indel_error_prob = max(base.deletion, ref_query.deletion ** indel_size)
                ref_error_prob = options.ref_error_factor * max(base.insertion, indel_query.insertion ** indel_size)
            else:
                _LOG.error(f"Unknown indel type: {report.description}")
                raise UnknownIndelTypeError(report.description)
        else:
            # No row for this repeat unit length: use the baseline rates as they are
            if report.indel_type == IndelType.INSERT:
                indel_error_prob, ref_error_prob = base.insertion, base.deletion
            elif report.indel_type == IndelType.DELETE:
                indel_error_prob, ref_error_prob = base.deletion, base.insertion
            else:
                _LOG.error(f"Unknown indel type: {report.description}")
                raise UnknownIndelTypeError(report.description)

        return indel_error_prob, ref_error_prob

    @staticmethod
    def get_min_tract_length(report: IndelReportInfo) -> int:
        """Shortest tract, in bases, that makes a repeat: two copies of the repeat unit"""
        return report.repeat_unit_length * 2

    def is_simple_tandem_repeat(self, report: IndelReportInfo) -> bool:
        """
        Whether the indel sits in an STR the model can describe: a simple insertion or deletion, with a repeat
        unit length present in the model, and enough copies of the unit in either allele.
        """
        min_tract_length = self.get_min_tract_length(report)
        return (report.repeat_unit_length <= self.max_motif_length
                and report.indel_type.is_simple
                and (report.ref_repeat_count >= min_tract_length
                     or report.indel_repeat_count >= min_tract_length))

    def __repr__(self):
        return (f'{self.__class__.__name__}(max_motif_length={self.max_motif_length}, '
                f'max_tract_length={self.max_tract_length})')
