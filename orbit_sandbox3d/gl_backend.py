"""
gl_backend.py

PyOpenGL implementation of the rendering backend: one flat-color shader
program, one reusable vertex buffer and one reusable index buffer.

Needs a current OpenGL (2.0+) context, e.g. a pygame window opened with
``pygame.OPENGL | pygame.DOUBLEBUF``.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from OpenGL import GL
from OpenGL import error as gl_error

from .compositor import LINES, TRIANGLE_FAN, TRIANGLES, DrawRequest
from .errors import BackendUnavailableError, ShaderBuildError

logger = logging.getLogger(__name__)

VERTEX_SHADER = """
#version 120
attribute vec3 a_position;
uniform mat4 u_modelViewMatrix;
uniform mat4 u_projectionMatrix;
void main() {
    gl_Position = u_projectionMatrix * u_modelViewMatrix * vec4(a_position, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 120
uniform vec4 u_color;
uniform vec2 u_resolution;
void main() {
    gl_FragColor = u_color;
}
"""

_PRIMITIVES = {
    TRIANGLES: GL.GL_TRIANGLES,
    LINES: GL.GL_LINES,
    TRIANGLE_FAN: GL.GL_TRIANGLE_FAN,
}


def _as_text(log) -> str:
    if isinstance(log, bytes):
        return log.decode("utf-8", errors="replace")
    return str(log or "")


def gl_version() -> Tuple[int, int]:
    """(major, minor) of the current context; raises if there is none."""
    try:
        raw = GL.glGetString(GL.GL_VERSION)
    except gl_error.Error as exc:
        raise BackendUnavailableError(f"No OpenGL context: {exc}") from exc
    if not raw:
        raise BackendUnavailableError("No OpenGL context is current.")
    text = _as_text(raw)
    try:
        major, minor = text.split()[0].split(".")[:2]
        return int(major), int(minor)
    except ValueError:
        raise BackendUnavailableError(f"Unrecognized OpenGL version string '{text}'.") from None


# ---------- Shader build ----------


def compile_shader(stage: str, shader_type, source: str) -> int:
    shader = GL.glCreateShader(shader_type)
    GL.glShaderSource(shader, source)
    GL.glCompileShader(shader)
    if not GL.glGetShaderiv(shader, GL.GL_COMPILE_STATUS):
        log = _as_text(GL.glGetShaderInfoLog(shader))
        GL.glDeleteShader(shader)
        raise ShaderBuildError(stage, log)
    return shader


def link_program(vertex_shader: int, fragment_shader: int) -> int:
    program = GL.glCreateProgram()
    GL.glAttachShader(program, vertex_shader)
    GL.glAttachShader(program, fragment_shader)
    GL.glLinkProgram(program)
    if not GL.glGetProgramiv(program, GL.GL_LINK_STATUS):
        log = _as_text(GL.glGetProgramInfoLog(program))
        GL.glDeleteProgram(program)
        raise ShaderBuildError("link", log)
    return program


def build_program(vertex_source: str = VERTEX_SHADER, fragment_source: str = FRAGMENT_SHADER) -> int:
    """
    Compile both stages and link them. On any failure every object created
    so far is deleted before the ShaderBuildError propagates.
    """
    vertex_shader = compile_shader("vertex", GL.GL_VERTEX_SHADER, vertex_source)
    try:
        fragment_shader = compile_shader("fragment", GL.GL_FRAGMENT_SHADER, fragment_source)
    except ShaderBuildError:
        GL.glDeleteShader(vertex_shader)
        raise
    try:
        return link_program(vertex_shader, fragment_shader)
    finally:
        # The linked program keeps its own copy
        GL.glDeleteShader(vertex_shader)
        GL.glDeleteShader(fragment_shader)


# ---------- Backend ----------


class GLBackend:
    def __init__(self, width: int, height: int):
        major, minor = gl_version()
        if major < 2:
            raise BackendUnavailableError(f"OpenGL 2.0+ required, context is {major}.{minor}.")
        logger.info("OpenGL %d.%d context", major, minor)

        self.program: Optional[int] = build_program()
        logger.info("Flat-color shader program built")
        GL.glUseProgram(self.program)

        self.a_position = GL.glGetAttribLocation(self.program, "a_position")
        self.u_model_view = GL.glGetUniformLocation(self.program, "u_modelViewMatrix")
        self.u_projection = GL.glGetUniformLocation(self.program, "u_projectionMatrix")
        self.u_color = GL.glGetUniformLocation(self.program, "u_color")
        u_resolution = GL.glGetUniformLocation(self.program, "u_resolution")
        if u_resolution != -1:
            GL.glUniform2f(u_resolution, float(width), float(height))

        self.vertex_buffer = GL.glGenBuffers(1)
        self.index_buffer = GL.glGenBuffers(1)

        GL.glViewport(0, 0, width, height)
        GL.glClearColor(0.0, 0.0, 0.0, 1.0)
        GL.glClearDepth(1.0)
        GL.glEnable(GL.GL_DEPTH_TEST)
        GL.glDepthFunc(GL.GL_LEQUAL)
        # Orbit paths are drawn at 0.2 alpha
        GL.glEnable(GL.GL_BLEND)
        GL.glBlendFunc(GL.GL_SRC_ALPHA, GL.GL_ONE_MINUS_SRC_ALPHA)

    def begin_frame(self, projection: np.ndarray):
        GL.glClear(GL.GL_COLOR_BUFFER_BIT | GL.GL_DEPTH_BUFFER_BIT)
        GL.glUseProgram(self.program)
        # Matrices are row-major on the CPU side
        GL.glUniformMatrix4fv(self.u_projection, 1, GL.GL_TRUE, projection.astype(np.float32))

    def draw(self, request: DrawRequest):
        positions = np.ascontiguousarray(request.positions, dtype=np.float32)

        GL.glUniformMatrix4fv(self.u_model_view, 1, GL.GL_TRUE, request.model_view.astype(np.float32))
        GL.glUniform4f(self.u_color, *request.color)

        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, self.vertex_buffer)
        GL.glBufferData(GL.GL_ARRAY_BUFFER, positions.nbytes, positions, GL.GL_DYNAMIC_DRAW)
        GL.glEnableVertexAttribArray(self.a_position)
        GL.glVertexAttribPointer(self.a_position, 3, GL.GL_FLOAT, GL.GL_FALSE, 0, None)

        mode = _PRIMITIVES[request.kind]
        if request.indices is not None:
            indices = np.ascontiguousarray(request.indices, dtype=np.uint16)
            GL.glBindBuffer(GL.GL_ELEMENT_ARRAY_BUFFER, self.index_buffer)
            GL.glBufferData(GL.GL_ELEMENT_ARRAY_BUFFER, indices.nbytes, indices, GL.GL_DYNAMIC_DRAW)
            GL.glDrawElements(mode, len(indices), GL.GL_UNSIGNED_SHORT, None)
        else:
            GL.glDrawArrays(mode, 0, len(positions))

    def end_frame(self):
        GL.glDisableVertexAttribArray(self.a_position)

    def release(self):
        if self.program is None:
            return
        GL.glDeleteBuffers(2, [self.vertex_buffer, self.index_buffer])
        GL.glDeleteProgram(self.program)
        self.program = None
        logger.debug("GL resources released")
