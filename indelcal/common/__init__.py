"""
Common functions and constants used throughout indelcal
"""
from .constants_and_defaults import *
from .io import *
from .logging import *
