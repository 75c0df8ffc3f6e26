from phase_sim.types import PhaseState
from phase_sim.core.fields import HarmonicField
from phase_sim.simulation import PhaseSimulation

sim = PhaseSimulation(HarmonicField(m=1.0, k=1.0), initial=PhaseState(1.2, 1.2))

for _ in range(240):
    sim.advance(1/60)

print("state:", sim.state, "energy:", sim.energy(), "trail:", len(sim.trail))
