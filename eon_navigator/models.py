"""Data models for Navigator API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .timecodec import format_timestamp, parse_timestamp


class Resolution(Enum):
    """Time granularity of a measurement series."""

    QUARTER = "quarter"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"

    @property
    def requires_range(self) -> bool:
        """Quarter and hour values need an explicit bounded range."""
        return self in (Resolution.QUARTER, Resolution.HOUR)


def optional_float(data: dict, key: str) -> float | None:
    """Read a nullable number, keeping absence as None."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} is not a number: {value!r}")
    return float(value)


@dataclass
class Installation:
    """An installation (metering point) on the account."""

    id: str
    active: bool = False
    address: str = ""
    business: str = ""
    category: str = ""
    city: str = ""
    energy_class: str = ""
    grid_area: str = ""
    name: str = ""
    org_number: str = ""
    price_area: str = ""
    resolution: str = ""
    safety_level: float | None = None
    has_measurements_subscription: bool = False
    has_costs_subscription: bool = False

    @classmethod
    def from_api_response(cls, data: dict) -> "Installation":
        """Create an Installation from API response data."""
        return cls(
            id=data["id"],
            active=bool(data.get("active", False)),
            address=data.get("address") or "",
            business=data.get("business") or "",
            category=data.get("category") or "",
            city=data.get("city") or "",
            energy_class=data.get("energyClass") or "",
            grid_area=data.get("gridArea") or "",
            name=data.get("name") or "",
            org_number=data.get("orgNumber") or "",
            price_area=data.get("priceArea") or "",
            resolution=data.get("resolution") or "",
            safety_level=optional_float(data, "safetyLevel"),
            has_measurements_subscription=bool(
                data.get("hasMeasurementsSubscription", False)
            ),
            has_costs_subscription=bool(data.get("hasCostsSubscription", False)),
        )

    def to_dict(self) -> dict:
        """Serialize using the API's field names."""
        return {
            "id": self.id,
            "active": self.active,
            "address": self.address,
            "business": self.business,
            "category": self.category,
            "city": self.city,
            "energyClass": self.energy_class,
            "gridArea": self.grid_area,
            "name": self.name,
            "orgNumber": self.org_number,
            "priceArea": self.price_area,
            "resolution": self.resolution,
            "safetyLevel": self.safety_level,
            "hasMeasurementsSubscription": self.has_measurements_subscription,
            "hasCostsSubscription": self.has_costs_subscription,
        }


@dataclass
class MeasurementSeries:
    """A measurement series; its id is used to fetch values."""

    id: int
    series_type: str
    unit: str
    last_update: datetime | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "MeasurementSeries":
        """Create a MeasurementSeries from API response data."""
        return cls(
            id=int(data["id"]),
            series_type=data.get("seriesType") or "",
            unit=data.get("unit") or "",
            last_update=parse_timestamp(data.get("lastUpdate")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "seriesType": self.series_type,
            "unit": self.unit,
            "lastUpdate": format_timestamp(self.last_update),
        }


@dataclass
class InstallationMeasurementSeries:
    """The measurement series available for one installation."""

    id: str
    measurement_series: list[MeasurementSeries] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict) -> "InstallationMeasurementSeries":
        """Create an InstallationMeasurementSeries from API response data."""
        return cls(
            id=data["id"],
            measurement_series=[
                MeasurementSeries.from_api_response(item)
                for item in data.get("measurementSeries") or []
            ],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "measurementSeries": [s.to_dict() for s in self.measurement_series],
        }


@dataclass
class Measurement:
    """A single value of a measurement series.

    A None value is a missing reading.
    """

    timestamp: datetime | None
    value: float | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Measurement":
        """Create a Measurement from API response data."""
        return cls(
            timestamp=parse_timestamp(data.get("timeStamp")),
            value=optional_float(data, "value"),
        )

    def to_dict(self) -> dict:
        return {
            "timeStamp": format_timestamp(self.timestamp),
            "value": self.value,
        }


@dataclass
class MeasurementSet:
    """Measurements of one series at one resolution."""

    id: int
    resolution: str
    measurements: list[Measurement] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict) -> "MeasurementSet":
        """Create a MeasurementSet from API response data."""
        return cls(
            id=int(data.get("id") or 0),
            resolution=data.get("resolution") or "",
            measurements=[
                Measurement.from_api_response(item)
                for item in data.get("measurements") or []
            ],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "resolution": self.resolution,
            "measurements": [m.to_dict() for m in self.measurements],
        }
