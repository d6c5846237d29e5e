"""Analytics overlay provider implementations.

Currently only Sensor Tower.  Any other analytics source can be plugged in
through IOverlayProvider without touching the overlay enricher.
"""

from src.providers.overlay.sensor_tower_provider import SensorTowerProvider

__all__ = ["SensorTowerProvider"]
