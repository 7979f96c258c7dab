import pygame
import pytest

from orbit_sandbox3d.camera import BACK, FORWARD, LEFT, RIGHT
from orbit_sandbox3d.config import MOON_ID, PLANET_ID, SUN_ID
from orbit_sandbox3d.input import PULSE, ROTATION, InputCollector


def key_down(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def key_up(key):
    return pygame.event.Event(pygame.KEYUP, key=key)


def motion(dx, dy):
    return pygame.event.Event(pygame.MOUSEMOTION, rel=(dx, dy), pos=(0, 0), buttons=(0, 0, 0))


def click():
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))


@pytest.fixture
def collector():
    return InputCollector()


def test_pressed_keys_persist_until_released(collector):
    collector.handle_event(key_down(pygame.K_w))
    collector.handle_event(key_down(pygame.K_LEFT))
    assert collector.snapshot().pressed == {FORWARD, LEFT}
    assert collector.snapshot().pressed == {FORWARD, LEFT}

    collector.handle_event(key_up(pygame.K_w))
    collector.handle_event(key_down(pygame.K_s))
    collector.handle_event(key_down(pygame.K_d))
    assert collector.snapshot().pressed == {LEFT, BACK, RIGHT}


def test_aliased_movement_keys_release_independently(collector):
    collector.handle_event(key_down(pygame.K_w))
    collector.handle_event(key_down(pygame.K_UP))
    collector.handle_event(key_up(pygame.K_UP))
    assert collector.snapshot().pressed == {FORWARD}

    collector.handle_event(key_up(pygame.K_w))
    assert collector.snapshot().pressed == frozenset()


def test_mouse_motion_ignored_until_captured(collector):
    collector.handle_event(motion(30, 5))
    frame = collector.snapshot()
    assert (frame.mouse_dx, frame.mouse_dy) == (0.0, 0.0)
    assert frame.capture_changed is None


def test_capture_accumulates_deltas_once(collector):
    collector.handle_event(click())
    collector.handle_event(motion(3, -4))
    collector.handle_event(motion(7, 1))
    frame = collector.snapshot()
    assert frame.capture_changed is True
    assert (frame.mouse_dx, frame.mouse_dy) == (10.0, -3.0)

    frame = collector.snapshot()
    assert (frame.mouse_dx, frame.mouse_dy) == (0.0, 0.0)
    assert frame.capture_changed is None


def test_escape_releases_capture(collector):
    collector.handle_event(click())
    collector.snapshot()
    collector.handle_event(key_down(pygame.K_ESCAPE))
    collector.handle_event(motion(50, 50))
    frame = collector.snapshot()
    assert frame.capture_changed is False
    assert not collector.captured
    assert frame.mouse_dx == 0.0


def test_ui_keys_become_one_shot_actions(collector):
    for key in (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_RIGHTBRACKET, pygame.K_SEMICOLON, pygame.K_r):
        collector.handle_event(key_down(key))
    frame = collector.snapshot()
    assert frame.toggles == [(PULSE, SUN_ID), (ROTATION, PLANET_ID), (ROTATION, MOON_ID), (PULSE, MOON_ID)]
    assert frame.speed_changes == [(PLANET_ID, 1), (MOON_ID, -1)]
    assert frame.reset

    frame = collector.snapshot()
    assert frame.toggles == [] and frame.speed_changes == [] and not frame.reset


@pytest.mark.parametrize("event", [
    pygame.event.Event(pygame.QUIT),
    pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q),
])
def test_quit_requests(collector, event):
    collector.handle_event(event)
    assert collector.snapshot().quit
