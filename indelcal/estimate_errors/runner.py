"""
Runs the indel error model over a table of indel reports and writes the estimated probabilities.
"""

import logging
import sys

from pathlib import Path

from ..common import ESTIMATE_OUTPUT_COLUMNS, open_input, open_output, validate_input_path, validate_output_path
from ..models import IndelErrorModel
from ..options import CallerOptions
from ..variants import read_indel_reports

__all__ = [
    "estimate_runner"
]

_LOG = logging.getLogger(__name__)


def estimate_runner(
        model_file: str | Path | None,
        reports_file: str | Path,
        config_file: str | Path | None,
        use_length_dependence: bool,
        overwrite: bool,
        output_dir: str | Path,
        output_prefix: str,
) -> Path:
    """
    Estimate indel and reference error probabilities for every report in a table.

    :param model_file: The calibration JSON. If not given, the config's `error_model` is used.
    :param reports_file: Tab-separated table of indel reports (see read_indel_reports)
    :param config_file: Optional yaml config for the caller options
    :param use_length_dependence: Turn on length dependence, whatever the config says
    :param overwrite: Replace an existing output file
    :param output_dir: The directory to write the output
    :param output_prefix: The prefix to use for the output filename
    :return: Path to the output table
    """
    if config_file:
        options = CallerOptions.from_yaml(config_file)
    else:
        options = CallerOptions()
        _LOG.debug("No config given, using default caller options")

    if use_length_dependence:
        options.use_length_dependence = True

    model_file = model_file or options.error_model
    if not model_file:
        _LOG.error("No indel error model given, use -m or set `error_model` in the config")
        sys.exit(1)

    validate_input_path(reports_file)
    validate_output_path(output_dir, is_file=False)
    output_file = Path(output_dir) / f"{output_prefix}.indel_error_probs.tsv.gz"
    validate_output_path(output_file, True, overwrite)

    model = IndelErrorModel.from_json(model_file)

    _LOG.info(f"Reading indel reports from {reports_file}")
    _LOG.info(f"Writing output to: {output_file}")

    count = 0
    str_count = 0
    with open_input(reports_file) as reports, open_output(output_file) as out:
        out.write("\t".join(ESTIMATE_OUTPUT_COLUMNS) + "\n")
        for report in read_indel_reports(reports):
            indel_error_prob, ref_error_prob = model.estimate(options, report, options.use_length_dependence)
            is_str = model.is_simple_tandem_repeat(report)
            fields = [
                report.description,
                report.indel_type.value,
                str(report.repeat_unit_length),
                str(report.ref_repeat_count),
                str(report.indel_repeat_count),
                str(int(is_str)),
                f"{indel_error_prob:.6g}",
                f"{ref_error_prob:.6g}",
            ]
            out.write("\t".join(fields) + "\n")
            count += 1
            str_count += is_str

    _LOG.info(f"Estimated error probabilities for {count} indel(s), {str_count} in short tandem repeats.")
    return output_file
