import logging
from phase_sim.driver import ManualScheduler
from phase_sim.io import builtin_preset
from phase_sim.renderer import BufferedRenderer

logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")

loop = ManualScheduler()
renderer = BufferedRenderer()
driver = builtin_preset("liouville_blob", scheduler=loop, renderer=renderer)

with driver:
    loop.run(600)  # 10 s at 60 fps

ratios = [f["snapshots"][0]["diagnostics"]["area_ratio"] for f in renderer.frames]
print("area ratio min/max:", min(ratios), max(ratios))
print("drifting at end:", driver.last_snapshots[0].diagnostics["drifting"])
