"""Normalized shapes handed to callers and stored in the caches."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .weather_codes import translate


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(lat=float(data["lat"]), lon=float(data["lon"]), label=str(data["label"]))


@dataclass(frozen=True)
class CurrentWeather:
    """Current conditions at a point.

    ``location`` echoes the coordinates returned by the forecast service,
    which may be snapped to its grid and so differ from the request.
    ``description`` is derived from ``weathercode`` and is not persisted.
    """

    location: Coordinates
    temp: float
    windspeed: float
    winddirection: float
    weathercode: int
    time: str
    humidity: Optional[float]
    description: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("description")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrentWeather":
        loc = data["location"]
        return cls(
            location=Coordinates(lat=float(loc["lat"]), lon=float(loc["lon"])),
            temp=data["temp"],
            windspeed=data["windspeed"],
            winddirection=data["winddirection"],
            weathercode=data["weathercode"],
            time=data["time"],
            humidity=data.get("humidity"),
            description=translate(data["weathercode"]),
        )
