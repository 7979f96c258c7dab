import random

import numpy as np
import pytest

from orbit_sandbox3d.animation import Scene
from orbit_sandbox3d.config import MOON_ID, PLANET_ID, SUN_ID, BodyConfig, SceneConfig
from orbit_sandbox3d.geometry import orbit_offset


@pytest.fixture
def scene():
    return Scene(SceneConfig())


def test_default_scene_layout(scene):
    assert [b.id for b in scene] == [SUN_ID, PLANET_ID, MOON_ID]
    assert scene.root is scene[SUN_ID]
    assert scene[MOON_ID].parent is scene[PLANET_ID]
    assert scene[PLANET_ID].angular_speed == 1
    assert scene[MOON_ID].angular_speed == 5


def test_unknown_body_raises_key_error(scene):
    with pytest.raises(KeyError):
        scene.toggle_pulse("comet")


def test_unsupported_toggles_raise_value_error(scene):
    with pytest.raises(ValueError):
        scene.toggle_rotation(SUN_ID)
    with pytest.raises(ValueError):
        scene.toggle_pulse(PLANET_ID)


def test_toggle_flips_flag_only(scene):
    assert scene.toggle_rotation(PLANET_ID) is True
    assert scene[PLANET_ID].angle == 0.0
    assert scene.toggle_rotation(PLANET_ID) is False


def test_orbit_advance_is_per_frame_not_per_ms(scene):
    scene.toggle_rotation(PLANET_ID)
    scene.advance(16.0)
    scene.advance(5000.0)
    assert scene[PLANET_ID].angle == pytest.approx(0.02)


def test_zero_speed_does_not_advance(scene):
    scene.toggle_rotation(MOON_ID)
    scene.set_angular_speed(MOON_ID, 0)
    scene.advance(16.0)
    assert scene[MOON_ID].angle == 0.0


@pytest.mark.parametrize("body_id,lo,hi", [(SUN_ID, 0.5, 1.5), (MOON_ID, 0.75, 1.25)])
def test_pulse_stays_within_bounds(scene, body_id, lo, hi):
    rng = random.Random(3)
    scene.toggle_pulse(body_id)
    body = scene[body_id]
    for _ in range(500):
        scene.advance(rng.choice([0.0, 1.0, 16.0, 33.3, 400.0, 1e6]))
        assert lo <= body.pulse_scale <= hi


def test_pulse_ping_pongs_at_bounds(scene):
    scene.toggle_pulse(SUN_ID)
    sun = scene[SUN_ID]
    scene.advance(1e6)
    assert sun.pulse_scale == 1.5
    assert sun.pulse_direction == -1
    scene.advance(1e6)
    assert sun.pulse_scale == 0.5
    assert sun.pulse_direction == 1
    scene.advance(100.0)
    assert sun.pulse_scale == pytest.approx(0.5 + 0.0015 * 100.0)


def test_draw_radius_uses_scale_only_while_pulsing(scene):
    moon = scene[MOON_ID]
    scene.toggle_pulse(MOON_ID)
    scene.advance(100.0)
    assert moon.draw_radius == pytest.approx(20.0 * 1.15)
    scene.toggle_pulse(MOON_ID)
    assert moon.draw_radius == 20.0


def test_speed_slider_is_clamped(scene):
    assert scene.set_angular_speed(PLANET_ID, 42) == 10.0
    assert scene.nudge_angular_speed(PLANET_ID, -3) == 7.0
    assert scene.set_angular_speed(PLANET_ID, -1) == 0.0


def test_reset_restores_defaults_and_is_idempotent(scene):
    scene.toggle_rotation(PLANET_ID)
    scene.toggle_rotation(MOON_ID)
    scene.toggle_pulse(SUN_ID)
    scene.toggle_pulse(MOON_ID)
    scene.set_angular_speed(PLANET_ID, 7)
    scene.set_angular_speed(MOON_ID, 2)
    for _ in range(30):
        scene.advance(250.0)

    for _ in range(2):
        scene.reset()
        for body in scene:
            assert body.angle == 0.0
            assert body.pulse_scale == 1.0
            assert body.pulse_direction == 1
            assert not body.rotation_active
            assert not body.pulse_active
        assert scene[PLANET_ID].angular_speed == 1
        assert scene[MOON_ID].angular_speed == 5


def test_positions_are_chained_to_current_parent(scene):
    scene[PLANET_ID].angle = 0.7
    scene[MOON_ID].angle = 2.1
    scene.update_positions()
    planet_pos = orbit_offset(320.0, 0.7)
    assert np.allclose(scene[SUN_ID].position, [0, 0, 0])
    assert np.allclose(scene[PLANET_ID].position, planet_pos)
    assert np.allclose(scene[MOON_ID].position, planet_pos + orbit_offset(90.0, 2.1))


def test_config_validation():
    with pytest.raises(ValueError):
        BodyConfig(id="x", name="X", draw_radius=-1.0, color=(1, 1, 1, 1))
    with pytest.raises(ValueError):
        BodyConfig(id="x", name="X", draw_radius=1.0, color=(1, 1, 1, 1), pulse_range=(1.2, 1.5))
    with pytest.raises(ValueError):
        SceneConfig(bodies=[
            BodyConfig(id="a", name="A", draw_radius=1.0, color=(1, 1, 1, 1), parent="b", orbit_radius=2.0),
            BodyConfig(id="b", name="B", draw_radius=1.0, color=(1, 1, 1, 1)),
        ])



@pytest.mark.parametrize("kwargs", [
    {"lat_bands": 0},
    {"long_bands": -3},
    {"lat_bands": 300, "long_bands": 300},
    {"dash_length": -0.1},
])
def test_scene_config_rejects_bad_mesh_settings(kwargs):
    with pytest.raises(ValueError):
        SceneConfig(**kwargs)
