import json
import logging
import numpy as np
import pytest
from phase_sim.driver import ManualScheduler
from phase_sim.io import (
    BUILTIN_PRESETS,
    builtin_preset,
    load_preset,
    preset_from_json,
    preset_to_json,
    save_preset,
    simulation_from_json,
    simulation_to_json,
)
from phase_sim.simulation import (
    AdvectionSimulation,
    BlobSimulation,
    LandscapeSimulation,
    OrbitSimulation,
    PhaseSimulation,
)


@pytest.mark.parametrize("name", sorted(BUILTIN_PRESETS))
def test_builtin_presets_run(name):
    loop = ManualScheduler()
    driver = builtin_preset(name, scheduler=loop)
    with driver:
        loop.run(30)
    assert driver.frames == 30
    for snap in driver.last_snapshots:
        assert snap.time > 0.0


def test_builtin_preset_constants():
    blob = builtin_preset("liouville_blob")
    sim = blob.simulations[0]
    assert isinstance(sim, BlobSimulation)
    assert (sim.radius, sim.n_vertices, sim.speed) == (0.45, 90, 1.2)
    assert sim.boundary.name == "clamp"
    assert blob.clock.max_dt == 0.025

    pair = builtin_preset("conservative_vs_dissipative")
    kinds = [s.field.kind for s in pair.simulations]
    assert kinds == ["harmonic", "damped"]
    assert pair.simulations[1].field.gamma == 0.35


def test_builtin_preset_not_shared():
    a = builtin_preset("orbit_energy")
    a.simulations[0].configure(e=0.2)
    a.simulations[0].apply_pending()
    b = builtin_preset("orbit_energy")
    assert b.simulations[0].elements.e == 0.55


def test_unknown_builtin_preset():
    with pytest.raises(ValueError):
        builtin_preset("pendulum")


def test_save_and_load_preset(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    driver = builtin_preset("conservative_vs_dissipative")
    path = tmp_path / "widget.json"
    save_preset(driver, str(path))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["max_dt"] == 0.03
    assert len(raw["simulations"]) == 2

    loaded = load_preset(str(path))
    assert "Loading preset" in caplog.text
    assert [s.name for s in loaded.simulations] == ["conservative", "dissipative"]
    assert loaded.simulations[1].field == driver.simulations[1].field
    assert loaded.simulations[0].trail.capacity == 240


def test_preset_saves_configuration_not_state():
    loop = ManualScheduler()
    driver = builtin_preset("hamiltonian_flow", scheduler=loop)
    with driver:
        loop.run(50)
    data = preset_to_json(driver, name="flow")
    assert data["name"] == "flow"
    assert data["simulations"][0]["initial"] == [1.2, 1.2]


def test_simulation_json_forms():
    orbit = simulation_to_json(OrbitSimulation())
    assert orbit == {"type": "orbit", "name": "orbit", "a": 1.0, "e": 0.55, "mu": 1.0, "speed": 1.0}

    adv = simulation_from_json({"type": "advection", "n": 128, "profile": "uniform", "diffusion": True})
    assert isinstance(adv, AdvectionSimulation)
    assert adv.field.n == 128
    assert simulation_to_json(adv)["profile"] == "uniform"


def test_landscape_json_form():
    sim = simulation_from_json({"type": "landscape", "potential": "double_well", "E": 1.5})
    assert isinstance(sim, LandscapeSimulation)
    assert simulation_to_json(sim) == {
        "type": "landscape", "name": "landscape", "potential": "double_well", "E": 1.5, "m": 1.0, "speed": 1.0,
    }
    assert builtin_preset("energy_landscape").clock.max_dt == 0.03


def test_custom_velocity_profile_not_serializable():
    sim = AdvectionSimulation(profile=lambda x: np.ones_like(x))
    with pytest.raises(TypeError):
        simulation_to_json(sim)


def test_particle_defaults():
    sim = simulation_from_json({"type": "particle", "field": {"kind": "double_well"}})
    assert isinstance(sim, PhaseSimulation)
    assert sim.boundary.name == "reflect"
    assert sim.name == "particle"


@pytest.mark.parametrize("data", [
    {"type": "spring"},
    {"type": "particle"},
    {"type": "particle", "field": {"m": 1.0}},
    {"type": "particle", "field": {"kind": "pendulum"}},
    {"type": "particle", "field": {"kind": "harmonic"}, "boundary": "bounce"},
    {"type": "particle", "field": {"kind": "harmonic"}, "trail": 10},
    {"type": "blob", "radius": -0.1},
    {"type": "orbit", "e": 1.2},
    {"type": "advection", "n": 1},
    {"type": "advection", "profile": "vortex"},
    {"type": "landscape", "potential": "morse"},
])
def test_invalid_simulation_definitions(data):
    with pytest.raises(ValueError):
        simulation_from_json(data)


def test_empty_preset_rejected():
    with pytest.raises(ValueError):
        preset_from_json({"simulations": []})


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_preset(str(path))
