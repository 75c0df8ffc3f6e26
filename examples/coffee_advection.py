from phase_sim.simulation import AdvectionSimulation

sim = AdvectionSimulation(profile="shear", speed=0.9)
m0 = sim.field.total_mass()

for frame in range(1, 601):
    sim.advance(1/60)
    if frame % 120 == 0:
        print(f"frame {frame}: peak at x={sim.field.peak_position():.3f} mass drift={sim.field.total_mass() / m0 - 1:+.2e}")

sim.configure(diffusion=True)
sim.apply_pending()
for _ in range(120):
    sim.advance(1/60)
print("after smoothing: max c =", float(sim.field.c.max()))
