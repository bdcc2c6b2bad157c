"""
Loads a calibration file and reports on its contents, so a new calibration can be checked before a run.
"""

import logging

from pathlib import Path

from ..models import IndelErrorModel

__all__ = [
    "check_model_runner"
]

_LOG = logging.getLogger(__name__)


def check_model_runner(model_file: str | Path) -> IndelErrorModel:
    """
    Load and validate an indel error model, logging a summary of the table.

    :param model_file: Path to the calibration JSON (may be gzipped)
    :return: The loaded model
    """
    _LOG.info(f"Checking indel error model: {model_file}")
    model = IndelErrorModel.from_json(model_file)

    baseline = model.entry(0, 0)
    _LOG.info(f"Header: {model.describe()}")
    _LOG.info(f"Repeat unit lengths: 1-{model.max_motif_length}")
    _LOG.info(f"Tract lengths: 1-{model.max_tract_length}")
    _LOG.info(f"Baseline insertion error: {baseline.insertion:.3g}, deletion error: {baseline.deletion:.3g}")

    for unit in range(model.max_motif_length):
        rates = model.table[unit, :model.max_tract_length]
        _LOG.debug(f"Unit length {unit + 1}: max insertion error {rates[:, 0].max():.3g}, "
                   f"max deletion error {rates[:, 1].max():.3g}")

    _LOG.info("Indel error model is consistent.")
    return model
