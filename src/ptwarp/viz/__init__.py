"""Plotting helpers for ptwarp (requires matplotlib)."""
