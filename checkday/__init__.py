"""Realtime notification core of the Checkday social planner."""
