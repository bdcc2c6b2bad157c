"""
Indel call descriptions consumed by the error model
"""
from .indel_report import *
