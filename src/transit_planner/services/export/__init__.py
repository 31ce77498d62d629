"""Export services."""

from .geojson import export_network_to_geojson, polygon_to_wkt, save_geojson

__all__ = ["export_network_to_geojson", "polygon_to_wkt", "save_geojson"]
