"""
Observations: optional viewers. Nothing in the core imports these.
"""
