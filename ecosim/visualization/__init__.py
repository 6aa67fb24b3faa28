"""Plots built from the population log."""
