"""
Validation of indel error model calibration files
"""

__all__ = ["check_model_runner"]

from .runner import check_model_runner
