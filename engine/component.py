from dataclasses import dataclass
from enum import Enum, auto


class EventType(Enum):
    MOUSE_PRESS = auto()
    RESIZE = auto()


@dataclass
class Event:
    type: EventType
    button: int = 0
    x: float = 0.0
    y: float = 0.0
    width: int = 0
    height: int = 0


class Component:
    def __init__(self, name="Component"):
        self.name = name
        self.enabled = True

    def on_init(self, canvas):
        """Called when the component is added to the engine."""
        pass

    def on_event(self, event: Event) -> bool:
        """Handle input events. Return True to consume the event."""
        return False

    def on_update(self, dt: float):
        """Advance the timeline by one (clamped) frame delta."""
        pass

    def on_render_ui(self, canvas):
        """Draw the current frame onto the Skia canvas."""
        pass
