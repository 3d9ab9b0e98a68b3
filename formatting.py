# Small helpers that turn raw metrics into display strings.


def km(meters: float) -> str:
    return f"{meters / 1000:.1f} km"


def mins(seconds: float) -> str:
    return f"{round(seconds / 60)} min"


def percent(ratio: float) -> str:
    """0.345 -> '34.5%'"""
    return f"{ratio * 100:.1f}%"


def slider_label(value: float) -> str:
    return f"{round(value * 100)}%"


def ascent(meters: float) -> str:
    return f"{meters:.0f} m"
