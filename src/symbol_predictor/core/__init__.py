"""Shared types, errors and the predict-symbol stage."""
