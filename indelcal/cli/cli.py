"""
The indelcal command line tools. The error model itself is a library (see indelcal.models); these commands wrap
it for checking a new calibration file and for scoring a table of indel reports outside a caller.
"""

__all__ = ['build_parser', 'main', 'run']

import argparse
import logging
import os
import sys
import time

from ..check_model import check_model_runner
from ..common import setup_logging
from ..estimate_errors import estimate_runner
from ..models import ModelConsistencyError, TractLengthOutOfRangeError, UnknownIndelTypeError

_LOG = logging.getLogger(__name__)


def _check_model(args: argparse.Namespace):
    check_model_runner(args.model_file)


def _estimate(args: argparse.Namespace):
    estimate_runner(
        args.model_file,
        args.reports_file,
        args.config_file,
        args.length_dependence,
        args.overwrite,
        args.output_dir,
        args.prefix
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the indelcal argument parser, with one subparser per tool.

    :return: The top level parser
    """
    parser = argparse.ArgumentParser(prog="indelcal", description="Indel error model tools")
    parser.add_argument("--no-log", action="store_true", help="Do not write a log file.")
    parser.add_argument("--log-dir", default=os.getcwd(),
                        help="Directory for the log file (default is the working directory)")
    parser.add_argument("--log-name", default=f"{time.strftime('%Y%m%d_%H%M%S')}_indelcal.log",
                        help="Name of the log file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARN", "WARNING", "ERROR"], default="INFO",
                        help="Severity level of the log messages to display")
    parser.add_argument("--log-detail", choices=["LOW", "MEDIUM", "HIGH"], default="MEDIUM",
                        help="Level of detail to include in the log messages")
    parser.add_argument("--silent-mode", action="store_true", help="Suppress messages to stdout")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    check = subparsers.add_parser("check-model", help="Validate an indel error model calibration file.")
    check.add_argument("-m", "--model", dest="model_file", metavar="FILE", required=True,
                       help="Calibration file (JSON, optionally bgzipped)")
    check.set_defaults(func=_check_model)

    estimate = subparsers.add_parser("estimate",
                                     help="Estimate indel and reference error probabilities for indel reports.")
    estimate.add_argument("-m", "--model", dest="model_file", metavar="FILE", default=None,
                          help="Calibration file. Overrides `error_model` from the config.")
    estimate.add_argument("-i", dest="reports_file", metavar="FILE", required=True,
                          help="Tab-separated table of indel reports, with the columns type, repeat_unit_length, "
                               "ref_repeat_count, indel_repeat_count and, optionally, "
                               "observed_homopolymer_length and description.")
    estimate.add_argument("-c", "--config", dest="config_file", metavar="FILE", default=None,
                          help="Yaml config with the caller options.")
    estimate.add_argument("--length-dependence", action="store_true",
                          help="Scale the error estimates by the number of repeat units inserted or deleted.")
    estimate.add_argument("--overwrite", action="store_true",
                          help="Replace an existing output file instead of failing.")
    estimate.add_argument("-o", "--output_dir", default=os.getcwd(),
                          help="Output directory. Created if not present.")
    estimate.add_argument("-p", "--prefix", default="indelcal", help="Prefix for the output file name")
    estimate.set_defaults(func=_estimate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Parse the arguments, set up logging and run the requested tool.

    Exit codes
    ----------
    0 - success, or help was requested.
    1 - no tool was named, or the tool failed.
    2 - the arguments could not be parsed.
    3, 5, 7, 9, 11 - an input or output path was rejected (see indelcal.common.io).

    :param argv: Command line arguments, without the program name. Defaults to sys.argv[1:].
    :return: The exit code
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 2

    if args.command is None:
        parser.print_help()
        return 1

    log_file = setup_logging(
        omit_log=args.no_log,
        directory=args.log_dir,
        filename=args.log_name,
        severity=args.log_level,
        verbosity=args.log_detail,
        silent_mode=args.silent_mode
    )
    if log_file is not None and not args.silent_mode:
        print(f"indelcal run log: {log_file.resolve()}")

    start = time.time()
    try:
        args.func(args)
    except SystemExit as exc:
        # Path checks log their own message before exiting
        return exc.code if isinstance(exc.code, int) else 1
    except (ModelConsistencyError, TractLengthOutOfRangeError, UnknownIndelTypeError) as exc:
        _LOG.error(f"{args.command}: {exc}")
        return 1
    except Exception:
        _LOG.exception(f"{args.command} failed")
        return 1

    _LOG.info(f"{args.command} finished in {time.time() - start:.2f} s")
    return 0


def run():
    """Console script entry point"""
    sys.exit(main())
