from .animation import CelestialBody, Scene
from .camera import Camera
from .compositor import DrawRequest, FrameCompositor, SceneState
from .config import AppConfig, BodyConfig, CameraConfig, SceneConfig, WindowConfig
from .errors import BackendUnavailableError, SceneError, ShaderBuildError
from .geometry import (
    DashedOrbitMesh,
    SphereMesh,
    generate_dashed_orbit,
    generate_flat_circle,
    generate_sphere,
)
from .input import FrameInput, InputCollector

__version__ = "0.1.0"
