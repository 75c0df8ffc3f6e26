"""
Microbenchmark: frame time vs number of blob vertices.
Run:
  python benchmarks/bench_steps.py
"""
import time
from phase_sim.driver import AnimationDriver, ManualScheduler
from phase_sim.profiler import FrameProfiler
from phase_sim.renderer import NullRenderer
from phase_sim.simulation import BlobSimulation

def run(n: int, frames: int = 300):
    prof = FrameProfiler(budget=1/60)
    loop = ManualScheduler()
    sim = BlobSimulation(n_vertices=n)
    driver = AnimationDriver(sim, scheduler=loop, renderer=NullRenderer(), max_dt=0.025, profiler=prof)
    driver.start()

    # warmup
    loop.run(30)

    t0 = time.perf_counter()
    loop.run(frames)
    t1 = time.perf_counter()
    driver.stop()

    per_frame = (t1 - t0) / frames
    return per_frame, prof

if __name__ == "__main__":
    for n in [90, 360, 1000, 5000, 20000]:
        per_frame, prof = run(n)
        print(f"N={n:6d}  frame={1e3*per_frame:8.3f} ms  frames/s={1/per_frame:9.1f}  over_budget={prof.over_budget}")
        summary = prof.stats.summary()
        for k in ["params", "advance", "render"]:
            if k in summary:
                s = summary[k]
                print(f"    {k:8s} mean={s['mean_ms']:.3f} ms  max={s['max_ms']:.3f} ms")
