"""
Unit tests for ForceSimulation

Tests alpha cooling, collision separation, pinning and the centering pull
on hand-built layouts.
"""
import math
import pytest
from forcebubbles.config import ForceConfig
from forcebubbles.layout import ForceSimulation, LayoutState, Entity, find_overlaps

pytestmark = pytest.mark.unit


def _entity(entity_id, x, y, radius):
    entity = Entity(id=entity_id, name=entity_id, series=(1.0,), start_year=2000)
    entity.x, entity.y = x, y
    entity.current_radius = radius
    return entity


def _state(*entities, size=200.0):
    return LayoutState(entities=list(entities), width=size, height=size,
                       year_range=(2000, 2000), selected_year=2000)


@pytest.fixture
def collide_only():
    """Collision without charge or centering"""
    return ForceConfig(strength=0.0, charge_strength=0.0)


class TestAlpha:
    """Tests for alpha cooling and the running flag"""

    def test_alpha_decay_rate(self):
        config = ForceConfig()
        assert config.alpha_decay == pytest.approx(1 - 0.001 ** (1 / 300))

    def test_stops_after_about_300_ticks(self):
        sim = ForceSimulation(_state(), ForceConfig())
        while sim.step():
            pass
        assert not sim.running
        assert 295 <= sim.ticks <= 305
        assert sim.alpha < 0.001

    def test_step_is_noop_when_stopped(self):
        sim = ForceSimulation(_state(), ForceConfig()).stop()
        assert sim.step() is False
        assert sim.ticks == 0

    def test_reheat_restarts(self):
        sim = ForceSimulation(_state(), ForceConfig()).stop()
        sim.reheat(0.2)
        assert sim.running
        assert sim.alpha == 0.2

    def test_alpha_converges_to_target(self):
        """A non-zero target keeps the simulation running"""
        sim = ForceSimulation(_state(), ForceConfig())
        sim.set_alpha_target(0.2)
        for _ in range(2000):
            sim.step()
        assert sim.running
        assert sim.alpha == pytest.approx(0.2, abs=1e-6)


class TestCollision:
    """Tests for overlap resolution"""

    def test_overlapping_pair_pushed_apart_symmetrically(self, collide_only):
        a = _entity('A', 100.0, 100.0, 10.0)
        b = _entity('B', 105.0, 100.0, 10.0)
        sim = ForceSimulation(_state(a, b), collide_only)
        sim.tick()
        # push (21 - 5) / 5 per unit offset, split evenly, damped by 0.6
        assert a.x == pytest.approx(95.2)
        assert b.x == pytest.approx(109.8)
        assert a.y == b.y == 100.0

    def test_pair_separates_to_padded_distance(self, collide_only):
        a = _entity('A', 100.0, 100.0, 10.0)
        b = _entity('B', 105.0, 100.0, 10.0)
        state = _state(a, b)
        sim = ForceSimulation(state, collide_only)
        for _ in range(100):
            sim.tick()
        assert math.hypot(a.x - b.x, a.y - b.y) >= 21.0
        assert find_overlaps(state, padding=1.0) == []

    def test_push_split_by_area(self, collide_only):
        """The smaller entity moves further"""
        big = _entity('BIG', 100.0, 100.0, 20.0)
        small = _entity('SMALL', 110.0, 100.0, 10.0)
        sim = ForceSimulation(_state(big, small), collide_only)
        sim.tick()
        assert small.x - 110.0 == pytest.approx(4 * (100.0 - big.x))

    def test_coincident_entities_separate(self, collide_only):
        a = _entity('A', 100.0, 100.0, 5.0)
        b = _entity('B', 100.0, 100.0, 5.0)
        state = _state(a, b)
        sim = ForceSimulation(state, collide_only)
        for _ in range(100):
            sim.tick()
        assert math.hypot(a.x - b.x, a.y - b.y) > 0

    def test_growing_radius_is_seen_immediately(self, collide_only):
        """Radii are read from the entities on every tick"""
        a = _entity('A', 100.0, 100.0, 5.0)
        b = _entity('B', 120.0, 100.0, 5.0)
        sim = ForceSimulation(_state(a, b), collide_only)
        sim.tick()
        assert (a.x, b.x) == (100.0, 120.0)

        a.current_radius = b.current_radius = 15.0
        sim.tick()
        assert a.x < 100.0
        assert b.x > 120.0


class TestPinned:
    """Tests for pinned entities"""

    def test_pinned_entity_is_immovable(self, collide_only):
        a = _entity('A', 100.0, 100.0, 10.0)
        b = _entity('B', 105.0, 100.0, 10.0)
        a.pin(100.0, 100.0)
        sim = ForceSimulation(_state(a, b), collide_only)
        sim.tick()
        assert (a.x, a.y) == (100.0, 100.0)
        assert (a.vx, a.vy) == (0.0, 0.0)
        # partner takes the full push
        assert b.x == pytest.approx(114.6)

    def test_pinned_entity_ignores_centering(self):
        a = _entity('A', 20.0, 30.0, 10.0)
        a.pin(20.0, 30.0)
        sim = ForceSimulation(_state(a), ForceConfig())
        for _ in range(50):
            sim.tick()
        assert (a.x, a.y) == (20.0, 30.0)

    def test_entity_snaps_to_pin(self):
        a = _entity('A', 20.0, 30.0, 10.0)
        a.pin(150.0, 60.0)
        sim = ForceSimulation(_state(a), ForceConfig())
        sim.tick()
        assert (a.x, a.y) == (150.0, 60.0)


class TestCentering:
    """Tests for the centering pull"""

    def test_single_entity_pulled_to_centre(self):
        a = _entity('A', 0.0, 0.0, 5.0)
        sim = ForceSimulation(_state(a, size=200.0), ForceConfig())
        sim.tick()
        assert 0.0 < a.x < 100.0
        assert a.x == pytest.approx(a.y)

        for _ in range(400):
            sim.tick()
        assert a.x == pytest.approx(100.0, abs=0.5)
        assert a.y == pytest.approx(100.0, abs=0.5)

    def test_charge_pushes_apart(self):
        """Two free entities without overlap repel each other"""
        a = _entity('A', 80.0, 100.0, 1.0)
        b = _entity('B', 120.0, 100.0, 1.0)
        sim = ForceSimulation(_state(a, b), ForceConfig(strength=0.0))
        sim.tick()
        assert a.x < 80.0
        assert b.x > 120.0


class TestFindOverlaps:
    """Tests for find_overlaps"""

    def test_reports_shortfall(self):
        state = _state(_entity('A', 0.0, 0.0, 10.0), _entity('B', 15.0, 0.0, 10.0))
        ((id_a, id_b, shortfall),) = find_overlaps(state, padding=1.0)
        assert (id_a, id_b) == ('A', 'B')
        assert shortfall == pytest.approx(6.0)

    def test_tolerance(self):
        state = _state(_entity('A', 0.0, 0.0, 10.0), _entity('B', 20.5, 0.0, 10.0))
        assert find_overlaps(state, padding=1.0) != []
        assert find_overlaps(state, padding=1.0, tolerance=1.0) == []
