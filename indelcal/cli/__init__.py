"""
Command line interface for indelcal
"""
