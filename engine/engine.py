import time

import glfw
import moderngl
import numpy as np
import skia

from engine.component import Component, Event, EventType
from engine.shaders import DEFAULT_FRAG, DEFAULT_VERT, GLOW_FRAG
from lib import tlog

# Skia rows run top-down, GL textures bottom-up, so v is flipped
QUAD = np.array([-1, -1, 0, 1, 1, -1, 1, 1, -1, 1, 0, 0, 1, 1, 1, 0], dtype="f4")

PASSES = {"default": DEFAULT_FRAG, "glow": GLOW_FRAG}


class Presenter:
    """Uploads the Skia raster to a texture and draws it through one post shader."""

    def __init__(self, gl: moderngl.Context, width: int, height: int, shader: str = "glow"):
        self.gl = gl
        self.size = (width, height)
        self.intensity = 0.6
        self.programs = {}
        for name, frag in PASSES.items():
            try:
                self.programs[name] = gl.program(vertex_shader=DEFAULT_VERT, fragment_shader=frag)
            except moderngl.Error as e:
                tlog.err(f"Shader '{name}' compilation failed: {e}")

        self.quad = gl.buffer(QUAD)
        self.vaos = {
            name: gl.vertex_array(prog, [(self.quad, "2f 2f", "in_pos", "in_uv")])
            for name, prog in self.programs.items()
        }
        self.texture = gl.texture(self.size, 4)
        self.shader = "default"
        self.use(shader)
        tlog.info(f"Compiled {len(self.programs)} shaders, presenting with '{self.shader}'")

    def use(self, name: str):
        if name not in self.programs:
            tlog.warn(f"Shader '{name}' unavailable, keeping '{self.shader}'")
            return
        self.shader = name

    def toggle(self):
        self.use("default" if self.shader == "glow" else "glow")

    def resize(self, width: int, height: int):
        self.size = (width, height)
        self.gl.viewport = (0, 0, width, height)
        self.texture.release()
        self.texture = self.gl.texture(self.size, 4)

    def present(self, surface: skia.Surface):
        prog = self.programs[self.shader]
        if "intensity" in prog: prog["intensity"].value = self.intensity
        if "resolution" in prog: prog["resolution"].value = self.size

        self.texture.write(surface.makeImageSnapshot().tobytes())
        self.gl.screen.use()
        self.gl.clear(0, 0, 0, 1)
        self.texture.use(0)
        self.vaos[self.shader].render(moderngl.TRIANGLE_STRIP)


class CoreEngine:
    def __init__(self, width=1280, height=720, title="Heart Tree", log_path="heart_tree.log"):
        tlog.init(log_path)
        self.width, self.height = width, height
        self.mouse_x, self.mouse_y = 0.0, 0.0
        self.show_fps = False
        self.components: list[Component] = []
        self.fps = 0.0
        self.last_heartbeat = time.perf_counter()

        with tlog.Span("engine_startup"):
            tlog.info(f"Opening {width}x{height} window '{title}'")
            self.window = self._open_window(width, height, title)
            self.gl = moderngl.create_context()
            tlog.info(f"GPU: {self.gl.info['GL_RENDERER']} | OpenGL: {self.gl.info['GL_VERSION']}")

            with tlog.Span("graphics_pipeline_setup"):
                self.surface = skia.Surface.MakeRasterN32Premul(width, height)
                self.presenter = Presenter(self.gl, width, height)
                self.hud_font = skia.Font(skia.Typeface.MakeDefault(), 14)

            tlog.info("Engine Startup Complete")

    def _open_window(self, width, height, title):
        if not glfw.init():
            tlog.err("Critical: GLFW initialization failed")
            raise RuntimeError("GLFW init failed")

        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

        window = glfw.create_window(width, height, title, None, None)
        if not window:
            tlog.err("Critical: Window creation failed")
            glfw.terminate()
            raise RuntimeError("Window creation failed")

        glfw.make_context_current(window)
        glfw.swap_interval(1)
        glfw.set_key_callback(window, self._on_key)
        glfw.set_mouse_button_callback(window, self._on_mouse_button)
        glfw.set_cursor_pos_callback(window, self._on_cursor)
        glfw.set_framebuffer_size_callback(window, self._on_resize)
        return window

    # -- input -------------------------------------------------------------

    def _on_resize(self, window, width, height):
        if width == 0 or height == 0:
            return
        tlog.info(f"Event: Window Resize -> {width}x{height}")
        self.width, self.height = width, height
        self.surface = skia.Surface.MakeRasterN32Premul(width, height)
        self.presenter.resize(width, height)
        self.dispatch(Event(EventType.RESIZE, width=width, height=height))

    def _on_key(self, window, key, scancode, action, mods):
        if action != glfw.PRESS:
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(window, True)
        elif key == glfw.KEY_F1:
            self.show_fps = not self.show_fps
        elif key == glfw.KEY_F2:
            self.presenter.toggle()

    def _on_mouse_button(self, window, button, action, mods):
        if action == glfw.PRESS:
            self.dispatch(Event(EventType.MOUSE_PRESS, button=button, x=self.mouse_x, y=self.mouse_y))

    def _on_cursor(self, window, x, y):
        self.mouse_x, self.mouse_y = x, y

    def dispatch(self, event: Event):
        # Topmost component first; a True return stops propagation
        for comp in reversed(self.components):
            if comp.enabled and comp.on_event(event):
                break

    # -- frame -------------------------------------------------------------

    def add_component(self, comp: Component):
        with tlog.Span(f"mounting_{comp.name}"):
            comp.on_init(self.surface.getCanvas())
            self.components.append(comp)
            comp.on_event(Event(EventType.RESIZE, width=self.width, height=self.height))

    def frame(self, dt: float):
        for comp in self.components:
            if comp.enabled: comp.on_update(dt)

        canvas = self.surface.getCanvas()
        canvas.clear(skia.ColorBLACK)
        for comp in self.components:
            if comp.enabled: comp.on_render_ui(canvas)
        if self.show_fps:
            canvas.drawString(f"FPS: {int(self.fps)}", 10, 20, self.hud_font,
                              skia.Paint(AntiAlias=True, Color=skia.ColorGREEN))

        self.presenter.present(self.surface)

    def run_heartbeat(self):
        now = time.perf_counter()
        if now - self.last_heartbeat >= 5.0:
            tlog.info(f"Heartbeat: FPS: {int(self.fps)} | Components: {len(self.components)}")
            self.last_heartbeat = now

    def run(self):
        tlog.info("Entering main loop")
        last = time.perf_counter()
        try:
            while not glfw.window_should_close(self.window):
                now = time.perf_counter()
                dt, last = now - last, now
                self.fps = 1.0 / dt if dt > 0 else 60

                self.frame(dt)

                glfw.swap_buffers(self.window)
                glfw.poll_events()
                self.run_heartbeat()
        finally:
            tlog.info("Shutdown")
            glfw.terminate()
            tlog.close()
