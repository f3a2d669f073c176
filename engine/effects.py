from engine.animation import ease_in_out_quad, progress


class CameraSwipe:
    """Horizontal camera offset that eases in once `start` is reached."""

    def __init__(self, start: float, duration: float, distance: float, curve=ease_in_out_quad):
        self.start = start
        self.duration = duration
        self.distance = distance
        self.curve = curve

    def offset(self, time: float) -> float:
        if time <= self.start:
            return 0.0
        return self.distance * self.curve(progress(time, self.start, self.duration))

    @property
    def end(self) -> float:
        return self.start + max(self.duration, 0.0)
