"""
Unit tests for InteractionHandler drag state machines
"""
import pytest
from forcebubbles.config import ForceConfig
from forcebubbles.layout import ForceSimulation, LayoutState, Entity
from forcebubbles.interaction import InteractionHandler

pytestmark = pytest.mark.unit


@pytest.fixture
def state():
    entities = []
    for code, x in [('USA', 60.0), ('CAN', 140.0)]:
        entity = Entity(id=code, name=code, series=(100.0,), start_year=2000)
        entity.x, entity.y = x, 100.0
        entity.current_radius = 10.0
        entities.append(entity)
    return LayoutState(entities=entities, width=200.0, height=200.0,
                       year_range=(2000, 2000), selected_year=2000)


@pytest.fixture
def simulation(state):
    sim = ForceSimulation(state, ForceConfig())
    sim.alpha = 0.0005
    sim.stop()
    return sim


@pytest.fixture
def handler(state, simulation):
    return InteractionHandler(state, simulation, ForceConfig())


class TestDragStart:
    """Tests for drag_start"""

    def test_pins_at_current_position(self, state, handler):
        assert handler.drag_start('USA')
        usa = state.get('USA')
        assert usa.is_pinned
        assert (usa.pinned_x, usa.pinned_y) == (60.0, 100.0)
        assert usa.drag.active
        assert state.active_drags == 1

    def test_reheats_settled_simulation(self, handler, simulation):
        handler.drag_start('USA')
        assert simulation.running
        assert simulation.alpha_target == 0.2
        assert simulation.alpha >= 0.2

    def test_hot_simulation_keeps_alpha(self, handler, simulation):
        simulation.reheat(0.8)
        handler.drag_start('USA')
        assert simulation.alpha == 0.8
        assert simulation.alpha_target == 0.2

    def test_unknown_entity(self, handler, state):
        assert handler.drag_start('WLD') is False
        assert state.active_drags == 0


class TestDragMove:
    """Tests for drag_move"""

    def test_moves_pin_and_position(self, state, handler):
        handler.drag_start('USA')
        assert handler.drag_move('USA', 30.0, 40.0)
        usa = state.get('USA')
        assert (usa.pinned_x, usa.pinned_y) == (30.0, 40.0)
        assert (usa.x, usa.y) == (30.0, 40.0)
        assert usa.drag.moves == 1

    def test_move_without_start_ignored(self, state, handler):
        assert handler.drag_move('USA', 30.0, 40.0) is False
        usa = state.get('USA')
        assert not usa.is_pinned
        assert (usa.x, usa.y) == (60.0, 100.0)

    def test_pinned_entity_follows_pointer_through_ticks(self, state, handler, simulation):
        handler.drag_start('USA')
        for step in range(30):
            pointer = (60.0 + step * 2.0, 100.0)
            handler.drag_move('USA', *pointer)
            simulation.step()
            assert (state.get('USA').x, state.get('USA').y) == pointer


class TestDragEnd:
    """Tests for drag_end"""

    def test_releases_entity(self, state, handler, simulation):
        handler.drag_start('USA')
        handler.drag_move('USA', 90.0, 90.0)
        assert handler.drag_end('USA')
        usa = state.get('USA')
        assert not usa.is_pinned
        assert usa.drag.phase == 'free'
        assert simulation.alpha_target == 0.0

    def test_end_without_start_ignored(self, handler):
        assert handler.drag_end('USA') is False

    def test_concurrent_drags(self, handler, simulation, state):
        """The simulation stays warm until the last drag ends"""
        handler.drag_start('USA')
        handler.drag_start('CAN')
        assert state.active_drags == 2

        handler.drag_end('USA')
        assert simulation.alpha_target == 0.2
        assert state.get('CAN').is_pinned

        handler.drag_end('CAN')
        assert simulation.alpha_target == 0.0
        assert state.active_drags == 0

    def test_released_entity_moves_again(self, state, handler, simulation):
        handler.drag_start('USA')
        handler.drag_move('USA', 20.0, 20.0)
        handler.drag_end('USA')
        for _ in range(10):
            simulation.step()
        usa = state.get('USA')
        assert (usa.x, usa.y) != (20.0, 20.0)
