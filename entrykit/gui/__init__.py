"""
gui - PySide6 front end for the Entry Search and Rename Tool
"""

from .gui_entry import main

__all__ = ["main"]
