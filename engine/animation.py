BACK_C1 = 1.70158
BACK_C3 = BACK_C1 + 1


def ease_out_quad(t): return 1 - (1 - t) * (1 - t)
def ease_in_out_quad(t): return 2 * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 2 / 2
def ease_out_back(t):
    # Overshoots past 1.0 before settling, used for "pop" effects
    return 1 + BACK_C3 * (t - 1) ** 3 + BACK_C1 * (t - 1) ** 2


def progress(time: float, start: float, duration: float) -> float:
    """Normalized progress of a window starting at `start`, clamped to [0, 1]."""
    if time < start: return 0.0
    if duration <= 0: return 1.0
    return min((time - start) / duration, 1.0)
