from .table import Point, CoordinateTable, parse_coordinates

__all__ = ["Point", "CoordinateTable", "parse_coordinates"]
