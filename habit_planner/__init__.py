"""Habit Planner: recurring habits and routines with per-day completion tracking."""
