"""
entrykit - Entry search and batch rename tool
"""

__version__ = "1.0.0"
