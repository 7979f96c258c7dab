import os

# No window is ever opened by the tests, but keep pygame off any real display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from orbit_sandbox3d.compositor import FrameCompositor, SceneState
from orbit_sandbox3d.config import AppConfig


class RecordingBackend:
    """Stands in for the GL backend and remembers what it was asked to do."""

    def __init__(self):
        self.frames = []
        self.projections = []
        self.released = False

    def begin_frame(self, projection):
        self.projections.append(projection)
        self.frames.append([])

    def draw(self, request):
        self.frames[-1].append(request)

    def end_frame(self):
        pass

    def release(self):
        self.released = True


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def state():
    return SceneState.from_config(AppConfig())


@pytest.fixture
def compositor(backend):
    return FrameCompositor(backend)
