"""
Error models used to judge indel calls
"""
from .errors import *
from .serialized_model import *
from .indel_error_model import *
