from phase_sim.io import builtin_preset
from phase_sim.driver import ManualScheduler
from phase_sim.renderer import DebugRenderer

loop = ManualScheduler()
driver = builtin_preset("energy_landscape", scheduler=loop, renderer=DebugRenderer())
ball = driver.simulations[0]
print("walls:", ball.walls)

driver.start()
loop.run(60)

# below the central bump the ball is trapped in the left well
ball.configure(potential="double_well", E=2.0)
loop.run(1)
print("walls:", ball.walls)
loop.run(60)
driver.stop()
