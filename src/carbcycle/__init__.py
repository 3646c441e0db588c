"""Carb-cycling macro planner: cycle targets and per-food serving solver."""

__version__ = "0.1.0"
