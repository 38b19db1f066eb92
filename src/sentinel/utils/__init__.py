"""
Utility modules for Sentinel: logging, debug output, coloured console
messages and file helpers.
"""
