import logging
from phase_sim.driver import ManualScheduler
from phase_sim.io import builtin_preset

logging.basicConfig(level=logging.INFO)

loop = ManualScheduler()
driver = builtin_preset("conservative_vs_dissipative", scheduler=loop)
conservative, dissipative = driver.simulations

with driver:
    for _ in range(10):
        loop.run(60)
        print(f"t={conservative.time:6.2f}  E_cons={conservative.energy():.5f}  E_diss={dissipative.energy():.5f}")
