from phase_sim.driver import ManualScheduler, AnimationDriver
from phase_sim.renderer import DebugRenderer
from phase_sim.simulation import OrbitSimulation
from phase_sim.types import OrbitalElements

loop = ManualScheduler()
orbit = OrbitSimulation(OrbitalElements(a=1.0, e=0.55, mu=1.0))
driver = AnimationDriver(orbit, scheduler=loop, renderer=DebugRenderer(), max_dt=0.03)

driver.start()
for _ in range(6):
    loop.run(20)

# eccentricity change applies at the next frame and restarts at perihelion
orbit.configure(e=0.8)
loop.run(3)
driver.stop()
