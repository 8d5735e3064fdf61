"""Web layer for Habit Planner."""
