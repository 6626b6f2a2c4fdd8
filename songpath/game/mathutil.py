"""Small scalar helpers shared by the game-side components."""


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def map_range(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Linearly map ``value`` from [in_min, in_max] to [out_min, out_max]."""
    return out_min + (value - in_min) / (in_max - in_min) * (out_max - out_min)


def ema(current: float, previous: float, alpha: float) -> float:
    """Exponential moving average: alpha * current + (1 - alpha) * previous."""
    return alpha * current + (1 - alpha) * previous
