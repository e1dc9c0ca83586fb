"""
Grid layout services.

placement: validation, assignment and first-fit search over GridState
geometry:  cell span to pixel rectangle conversion
reporter:  free cells, layout summaries and ASCII rendering
"""

from . import geometry, placement, reporter

__all__ = ["geometry", "placement", "reporter"]
