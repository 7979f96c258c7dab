class SceneError(Exception):
    """Base class for fatal orbit_sandbox3d errors."""


class BackendUnavailableError(SceneError):
    """No usable OpenGL surface/context could be created."""


class ShaderBuildError(SceneError):
    """A shader failed to compile, or the program failed to link."""

    def __init__(self, stage: str, log: str):
        self.stage = stage
        self.log = log
        super().__init__(f"{stage} shader build failed:\n{log}")
