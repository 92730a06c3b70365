"""
Analysis tools for station temperature records.

Modules:
- calendar_graph: Season-aligned extreme temperature calendar grids
"""

__all__ = []
