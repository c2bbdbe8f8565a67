"""
Environments: the frame loop that ties planets and swarms together.
"""

from .simulation import Clock, Simulation

__all__ = ["Clock", "Simulation"]
