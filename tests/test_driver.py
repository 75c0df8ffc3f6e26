import pytest
from phase_sim.types import PhaseState
from phase_sim.core.fields import HarmonicField, DampedField
from phase_sim.driver import AnimationDriver, FrameClock, ManualScheduler
from phase_sim.profiler import FrameProfiler
from phase_sim.renderer import BufferedRenderer
from phase_sim.simulation import PhaseSimulation


def make_driver(**kwargs):
    sim = PhaseSimulation(HarmonicField(), initial=PhaseState(1.2, 1.2))
    loop = ManualScheduler()
    return AnimationDriver(sim, scheduler=loop, **kwargs), sim, loop


# ----------------------------------------------------------------------
# FrameClock
# ----------------------------------------------------------------------

def test_first_tick_is_zero():
    clock = FrameClock()
    assert clock.tick(123.4) == 0.0


def test_clock_clamps_long_gaps():
    clock = FrameClock(max_dt=0.05)
    clock.tick(0.0)
    assert clock.tick(0.016) == pytest.approx(0.016)
    assert clock.tick(5.0) == 0.05


def test_clock_ignores_backwards_time():
    clock = FrameClock()
    clock.tick(1.0)
    assert clock.tick(0.5) == 0.0
    assert clock.tick(0.51) == pytest.approx(0.01)


def test_clock_time_scale_for_milliseconds():
    clock = FrameClock(time_scale=1e-3)
    clock.tick(1000.0)
    assert clock.tick(1016.0) == pytest.approx(0.016)


def test_clock_reset():
    clock = FrameClock()
    clock.tick(0.0)
    clock.reset()
    assert clock.tick(0.02) == 0.0


def test_clock_rejects_bad_cap():
    with pytest.raises(ValueError):
        FrameClock(max_dt=0.0)


# ----------------------------------------------------------------------
# AnimationDriver
# ----------------------------------------------------------------------

def test_driver_needs_a_simulation():
    with pytest.raises(ValueError):
        AnimationDriver()


def test_start_without_scheduler():
    driver = AnimationDriver(PhaseSimulation(HarmonicField()))
    with pytest.raises(RuntimeError):
        driver.start()


def test_start_subscribes_once():
    driver, _, loop = make_driver()
    driver.start()
    driver.start()
    assert loop.subscriber_count == 1
    assert driver.running


def test_frames_advance_simulation():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run(10, fps=60)
    assert driver.frames == 10
    # first frame has no predecessor
    assert sim.time == pytest.approx(9 / 60)


def test_long_gap_is_clamped():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run_frame(0.0)
    loop.run_frame(10.0)
    assert sim.time == pytest.approx(0.05)


def test_stop_unsubscribes_deterministically():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run(3)
    driver.stop()
    assert loop.subscriber_count == 0
    assert not driver.running

    frames, t = driver.frames, sim.time
    loop.run(5)
    assert driver.frames == frames
    assert sim.time == t
    driver.stop()


def test_context_manager_stops():
    driver, _, loop = make_driver()
    with driver:
        assert loop.subscriber_count == 1
        loop.run(2)
    assert loop.subscriber_count == 0


def test_pause_resume_without_jump():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run(10)
    driver.pause()
    state, t = sim.state, sim.time
    loop.run(30)
    assert sim.state == state
    assert driver.frames == 40

    driver.resume()
    loop.run_frame(loop.now + 100.0)
    assert sim.state == state
    loop.run_frame(loop.now + 0.01)
    assert sim.time == pytest.approx(t + 0.01)


def test_params_applied_between_frames():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run(10)
    sim.configure(k=4.0)
    sim.configure(m=2.0)
    assert sim.field.k == 1.0

    loop.run_frame(loop.now)
    assert (sim.field.m, sim.field.k) == (2.0, 4.0)
    # reset happened before this frame's advance
    assert sim.time <= 0.05


def test_side_by_side_share_dt():
    a = PhaseSimulation(HarmonicField(), initial=PhaseState(2.2, 0.0), speed=1.2, name="conservative")
    b = PhaseSimulation(DampedField(gamma=0.35), initial=PhaseState(2.2, 0.0), speed=1.2, name="dissipative")
    loop = ManualScheduler()
    driver = AnimationDriver(a, b, scheduler=loop, max_dt=0.03)
    driver.start()
    loop.run(300)
    assert a.time == b.time
    assert b.energy() < a.energy()
    assert [s.name for s in driver.last_snapshots] == ["conservative", "dissipative"]


def test_driver_reset():
    driver, sim, loop = make_driver()
    driver.start()
    loop.run(20)
    driver.reset()
    assert sim.state == PhaseState(1.2, 1.2)
    assert sim.time == 0.0


def test_renderer_receives_every_frame():
    renderer = BufferedRenderer()
    driver, _, loop = make_driver(renderer=renderer)
    driver.start()
    loop.run(7)
    assert len(renderer.frames) == 7
    assert renderer.frames[-1]["snapshots"][0]["name"] == "particle"


def test_profiler_sections():
    profiler = FrameProfiler()
    driver, _, loop = make_driver(profiler=profiler)
    driver.start()
    loop.run(5)
    summary = profiler.stats.summary()
    assert profiler.frames == 5
    assert summary["params"]["n"] == 5
    assert summary["render"]["n"] == 5
    assert summary["advance"]["n"] == 4


def test_profiler_keeps_recent_window():
    profiler = FrameProfiler(window=3)
    driver, _, loop = make_driver(profiler=profiler)
    driver.start()
    loop.run(10)
    assert profiler.frames == 10
    assert len(profiler.stats.samples["render"]) == 3
    assert profiler.stats.summary()["render"]["n"] == 3
