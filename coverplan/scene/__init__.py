"""
Scene description: obstacles, target areas, cells and synthetic scenes.
"""

from coverplan.scene.models import Cell, Obstacle, TargetArea
from coverplan.scene.synthetic import Scenario, generate_room_scenario, reference_scenario

__all__ = [
    "Cell",
    "Obstacle",
    "TargetArea",
    "Scenario",
    "generate_room_scenario",
    "reference_scenario",
]
