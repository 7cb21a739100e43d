import pytest

pygame = pytest.importorskip("pygame")

from multibrot.evaluator import FractalMode, FractalParameters
from multibrot.interaction import InteractionController
from multibrot.palette import Palette
from multibrot.view import ViewState, Viewport
from multibrot.viewer import FractalViewer, translate_event


@pytest.fixture
def controller():
    return InteractionController(ViewState(), Viewport(800, 600))


def _event(kind, **attrs):
    return pygame.event.Event(kind, **attrs)


def test_left_button_drag_pans(controller):
    assert not translate_event(_event(pygame.MOUSEBUTTONDOWN, button=1, pos=(400, 300)), controller)
    assert translate_event(_event(pygame.MOUSEMOTION, pos=(460, 300), rel=(60, 0), buttons=(1, 0, 0)), controller)
    assert controller.view.center_x == pytest.approx(-0.4)
    translate_event(_event(pygame.MOUSEBUTTONUP, button=1, pos=(460, 300)), controller)
    assert not controller.dragging


def test_other_buttons_do_not_start_a_drag(controller):
    translate_event(_event(pygame.MOUSEBUTTONDOWN, button=3, pos=(400, 300)), controller)
    assert not controller.dragging
    assert not translate_event(_event(pygame.MOUSEMOTION, pos=(10, 10), rel=(0, 0), buttons=(0, 0, 0)), controller)


def test_leaving_the_window_ends_the_drag(controller):
    translate_event(_event(pygame.MOUSEBUTTONDOWN, button=1, pos=(400, 300)), controller)
    translate_event(_event(pygame.WINDOWLEAVE), controller)
    assert not controller.dragging


def test_scrolling_up_zooms_in(controller):
    changed = translate_event(_event(pygame.MOUSEWHEEL, x=0, y=1), controller, pointer=(400, 300))
    assert changed
    assert controller.view.side == pytest.approx(1.8)


def test_viewer_clamps_parameter_adjustments():
    viewer = FractalViewer(
        Viewport(32, 24),
        FractalParameters(power=9.98, julia_seed=complex(0.995, 0.0)),
        palette=Palette.from_array([[255, 0, 0]]),
    )
    viewer._adjust(power=0.05, seed=complex(0.01, 0.0))
    assert viewer.params.power == 10.0
    assert viewer.params.julia_seed.real == 1.0


def test_viewer_key_toggles_mode():
    viewer = FractalViewer(Viewport(32, 24), FractalParameters(), palette=Palette.from_array([[255, 0, 0]]))
    viewer.view.side = 0.5
    viewer._on_key(pygame.K_SPACE, pygame)
    assert viewer.view.mode is FractalMode.JULIA
    assert viewer.view.side == 2.0
    assert viewer._caption().startswith("Julia Set")
