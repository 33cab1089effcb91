"""API utility helpers."""
