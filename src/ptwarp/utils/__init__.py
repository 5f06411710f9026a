"""Utility helpers shared across ptwarp."""
