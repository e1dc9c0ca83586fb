"""
Display modules for the canvas-grid CLI.
"""

from . import layout_display

__all__ = ['layout_display']
