"""Simulation plugins discovered by ``ecosim.core.plugin_registry``."""
