"""
Batch estimation of indel error probabilities for a table of indel reports
"""

__all__ = ["estimate_runner"]

from .runner import estimate_runner
