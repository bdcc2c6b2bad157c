"""
Options for the indel error estimates. These can be given directly, or read from a yaml config file using pyyaml.
Each key in the config is checked against a table of definitions, giving its type, default and acceptable range,
and a bad value stops the run with a message in the log.

Example config:

    error_model: /path/to/indel_model.json
    indel_ref_error_factor: 1.0
    use_length_dependence: false
"""

__all__ = [
    "CallerOptions"
]

import logging
import sys

from math import inf
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import yaml

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from .common import DEFAULT_REF_ERROR_FACTOR, validate_input_path

_LOG = logging.getLogger(__name__)


class CallerOptions(SimpleNamespace):
    """
    Options read by the indel error model.

    :param ref_error_factor: Multiplier applied to the probability that a true indel was masked as reference
    :param use_length_dependence: Scale error estimates by the number of repeat units inserted or deleted
    :param error_model: Path to the calibration JSON for the indel error model
    """

    # (type, default, criteria 1, criteria 2). For numbers the criteria are the inclusive low and high bounds.
    # For paths, criteria 1 is 'exists' to require an existing file.
    definitions = {
        'error_model': (Path, None, 'exists', None),
        'indel_ref_error_factor': (float, DEFAULT_REF_ERROR_FACTOR, 1e-10, inf),
        'use_length_dependence': (bool, False, None, None),
    }

    # config keys that are stored under a different attribute name
    attribute_names = {'indel_ref_error_factor': 'ref_error_factor'}

    def __init__(self,
                 ref_error_factor: float = DEFAULT_REF_ERROR_FACTOR,
                 use_length_dependence: bool = False,
                 error_model: Path | None = None,
                 **kwargs: Any):
        super().__init__(**kwargs)
        self.ref_error_factor: float = ref_error_factor
        self.use_length_dependence: bool = use_length_dependence
        self.error_model: Path | None = error_model

    @staticmethod
    def from_yaml(config_file: str | Path) -> "CallerOptions":
        """
        Build options from a yaml config. Keys not present in the config keep their defaults.

        :param config_file: Path to the config file
        :return: The validated options
        """
        validate_input_path(config_file)
        options = CallerOptions()
        values = options.read_yaml(config_file)
        options.__dict__.update(values)
        options.log_configuration()
        return options

    @staticmethod
    def check_and_log_error(keyname: str, value_to_check, crit1, crit2):
        if value_to_check is None:
            pass
        elif crit1 == "exists":
            validate_input_path(value_to_check)
        elif isinstance(crit1, (int, float)) and isinstance(crit2, (int, float)):
            if not (crit1 <= value_to_check <= crit2):
                _LOG.error(f'`{keyname}` must be between {crit1} and {crit2} (input: {value_to_check}).')
                sys.exit(1)

    def read_yaml(self, config_yaml: str | Path) -> dict:
        """
        Read and validate the config file.

        :param config_yaml: Path to the config file
        :return: Dictionary of attribute names to validated values
        """
        with open(config_yaml, 'r') as handle:
            config = yaml.load(handle, Loader=Loader) or {}

        if not isinstance(config, dict):
            _LOG.error(f"Config file {config_yaml} must contain a mapping of options")
            sys.exit(1)

        values = {}
        for key, value in config.items():
            if key not in self.definitions:
                _LOG.debug(f"Ignoring unknown config key `{key}`")
                continue
            type_of_var, default, criteria1, criteria2 = self.definitions[key]
            if value is None or value == ".":
                _LOG.debug(f"No value entered for `{key}`, using default ({default}).")
                continue

            # Now we check that the type is correct, and it is in range, depending on the type defined for it
            if type_of_var == Path:
                if not isinstance(value, str):
                    _LOG.error(f"Incorrect type for value entered for {key}: {type_of_var} (found: {value})")
                    sys.exit(1)
                value = Path(value)
            elif type_of_var == bool:
                if not isinstance(value, bool):
                    _LOG.error(f"Incorrect type for value entered for {key}: {type_of_var} (found: {value})")
                    sys.exit(1)
            else:
                try:
                    value = type_of_var(value)
                except (TypeError, ValueError):
                    _LOG.error(f"Incorrect type for value entered for {key}: {type_of_var} (found: {value})")
                    sys.exit(1)

            self.check_and_log_error(key, value, criteria1, criteria2)
            values[self.attribute_names.get(key, key)] = value

        return values

    def log_configuration(self):
        """
        Log the options in effect, for reproducibility.
        """
        _LOG.info('Indel error model configuration...')
        _LOG.info(f'  - calibration file: {self.error_model}')
        _LOG.info(f'  - reference error factor: {self.ref_error_factor}')
        _LOG.info(f'  - length dependence: {self.use_length_dependence}')
