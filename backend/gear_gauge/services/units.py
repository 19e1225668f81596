"""Display conversion for distances. Stored values are always kilometres."""

from gear_gauge.schemas.settings import DistanceUnit

KM_PER_MILE = 1.609344


def convert_distance(km: float, unit: DistanceUnit) -> float:
    if unit == DistanceUnit.MILES:
        return km / KM_PER_MILE
    return km


def format_distance(km: float, unit: DistanceUnit) -> str:
    """e.g. 1234.5 km -> "1234.5 km" (no grouping, at most 2 fraction digits)."""
    value = round(convert_distance(km, unit), 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    suffix = "mi" if unit == DistanceUnit.MILES else "km"
    return f"{text} {suffix}"
