"""
Random-Walk Particles: massless satellites tethered to wandering mass centers.

A handful of planets drift under smoothed Gaussian noise. Tens of thousands of
satellites are pulled toward them by a tunable inverse-power force and held to
their home shape by a damped spring. Color follows speed.
"""

__version__ = "0.1.0"
