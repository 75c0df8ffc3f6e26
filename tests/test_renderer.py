import io
from phase_sim.core.fields import HarmonicField
from phase_sim.renderer import BufferedRenderer, DebugRenderer, NullRenderer
from phase_sim.renderer.adapter import describe_state
from phase_sim.simulation import (
    AdvectionSimulation,
    BlobSimulation,
    OrbitSimulation,
    PhaseSimulation,
)


def all_snapshots():
    return [
        PhaseSimulation(HarmonicField()).snapshot(),
        BlobSimulation().snapshot(),
        OrbitSimulation().snapshot(),
        AdvectionSimulation(n=50).snapshot(),
    ]


def test_describe_each_state_kind():
    texts = [describe_state(s.state) for s in all_snapshots()]
    assert texts[0].startswith("q=")
    assert texts[1] == "blob n=90"
    assert texts[2].startswith("E=")
    assert texts[3].startswith("field n=50")


def test_debug_renderer_output():
    out = io.StringIO()
    DebugRenderer(output=out).render_frame(all_snapshots())
    text = out.getvalue()
    assert text.startswith("=== Frame t=0.0000 ===")
    assert "[particle]" in text
    assert "energy=" in text
    assert "area_ratio=1" in text


def test_debug_renderer_quiet():
    out = io.StringIO()
    DebugRenderer(output=out, verbose=False).render_frame(all_snapshots()[:1])
    assert "energy" not in out.getvalue()


def test_buffered_renderer_limits_history():
    renderer = BufferedRenderer(max_frames=3)
    snaps = all_snapshots()
    for _ in range(5):
        renderer.render_frame(snaps)
    assert len(renderer.frames) == 3
    frame = renderer.frames[0]
    assert [s["name"] for s in frame["snapshots"]] == ["particle", "blob", "orbit", "advection"]
    assert frame["snapshots"][0]["state"] == [1.2, 1.2]
    assert len(frame["snapshots"][1]["state"]) == 90
    renderer.clear()
    assert renderer.frames == []


def test_null_renderer():
    NullRenderer().render_frame(all_snapshots())
