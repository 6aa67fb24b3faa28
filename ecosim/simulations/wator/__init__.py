"""Wa-Tor style fish and shark simulation on a toroidal grid."""

from ecosim.simulations.wator.sim import SIMULATION_NAME, SimulationClass

__all__ = ["SIMULATION_NAME", "SimulationClass"]
