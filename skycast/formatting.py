import math
from typing import List, Optional, Tuple

from .errors import SkycastError
from .models import CurrentWeather, Location
from .weather_codes import icon_for_code

# label, humidity factor, upper bound
_RAIN_BARS = [
    ("09 am", 0.65, 95),
    ("12 pm", 0.8, 95),
    ("03 pm", 1.05, 100),
    ("06 pm", 0.9, 95),
    ("09 pm", 0.6, 90),
]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def format_temperature(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{_round_half_up(value)}°C"


def format_humidity(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{_round_half_up(value)}%"


def rain_chance_estimate(humidity: Optional[float]) -> List[Tuple[str, int]]:
    """Rough chance-of-rain bars through the day, scaled from humidity."""
    base = clamp(humidity if humidity is not None else 40, 5, 95)
    return [(label, _round_half_up(clamp(base * factor, 5, cap))) for label, factor, cap in _RAIN_BARS]


def format_weather_message(location: Location, weather: CurrentWeather) -> str:
    lines = [
        f"{icon_for_code(weather.weathercode)} {location.label}",
        weather.description,
        f"Temperature: {format_temperature(weather.temp)}",
        f"Humidity: {format_humidity(weather.humidity)}",
        f"Wind: {weather.windspeed} km/h from {weather.winddirection}°",
        f"Observed: {weather.time}",
    ]
    if weather.humidity is not None:
        lines.append("")
        lines.append("Chance of rain (est.):")
        for label, value in rain_chance_estimate(weather.humidity):
            lines.append(f"  {label}: {value}%")
    return "\n".join(lines)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, SkycastError):
        return exc.user_message
    return SkycastError.user_message
