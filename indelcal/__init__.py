"""
indelcal: calibrated indel error probabilities for variant calling
"""

__version__ = '1.0.0'

from .models import (IndelErrorModel, ErrorPair, ModelConsistencyError, TractLengthOutOfRangeError,
                     UnknownIndelTypeError)
from .options import CallerOptions
from .variants import IndelType, IndelReportInfo
