# MIT License (see LICENSE)
"""
Widget preset configuration.

This subpackage provides:
    - Built-in presets reproducing each teaching widget's constants.
    - JSON loading/saving of presets (configuration only, never evolved state).

Typical usage:
    from phase_sim.io import builtin_preset, load_preset

    driver = builtin_preset("liouville_blob", scheduler=host_loop)
    driver = load_preset("my_widget.json", scheduler=host_loop)
"""
from .json_io import (
    BUILTIN_PRESETS,
    builtin_preset,
    load_preset,
    load_preset_raw,
    preset_from_json,
    preset_to_json,
    save_preset,
    simulation_from_json,
    simulation_to_json,
)

__all__ = [
    "BUILTIN_PRESETS",
    # Loading
    "builtin_preset",
    "load_preset",
    "load_preset_raw",
    "preset_from_json",
    # Saving
    "preset_to_json",
    "save_preset",
    "simulation_from_json",
    "simulation_to_json",
]
