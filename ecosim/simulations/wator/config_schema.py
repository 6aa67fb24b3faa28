"""Config schema for the wator simulation plugin."""

from dataclasses import asdict, fields

from ecosim.simulations.wator.engine import WatorRules

REQUIRED_PARAMS = {
    "width": int,
    "height": int,
}

DEFAULTS = {
    "width": 120,
    "height": 100,
    **asdict(WatorRules()),
}

OPTIONAL_PARAMS = {field.name: type(getattr(WatorRules(), field.name)) for field in fields(WatorRules)}

CONSTRAINTS = {
    "width": "positive",
    "height": "positive",
    "initial_energy": "positive",
    "prey_density_divisor": "positive",
    "predator_density_divisor": "positive",
    "populate_attempts_per_agent": "positive",
    "prey_energy_decay": "non_negative",
    "prey_move_probability": "probability",
    "prey_move_energy_gain": "non_negative",
    "prey_reproduction_threshold": "non_negative",
    "prey_reproduction_cost": "non_negative",
    "predator_energy_decay": "non_negative",
    "predator_feeding_gain": "non_negative",
    "predator_move_probability": "probability",
    "predator_turn_cost": "non_negative",
    "predator_reproduction_threshold": "non_negative",
    "predator_reproduction_cost": "non_negative",
    "predator_reproduction_probability": "probability",
}
