"""Simulation runtime: config, RNG, plugin lookup, frame publication."""
