"""eon-navigator - Python library for the E.ON Energy Navigator API."""

from .auth import Credentials, EonAuth, TokenInfo
from .client import EonClient
from .costs import (
    ColdCosts,
    CostStatement,
    ElectricityCosts,
    EnergyClass,
    GasCosts,
    HeatCosts,
    ProductionCosts,
    UnrecognizedCosts,
    decode_cost_statement,
)
from .errors import (
    ApiError,
    AuthenticationError,
    DecodeError,
    EonError,
    ErrorKind,
    MalformedTimestampError,
    NoContentError,
    NoCostDataError,
    TransportError,
    classify_status,
)
from .models import (
    Installation,
    InstallationMeasurementSeries,
    Measurement,
    MeasurementSeries,
    MeasurementSet,
    Resolution,
)

__version__ = "0.1.0"
__all__ = [
    "ApiError",
    "AuthenticationError",
    "ColdCosts",
    "CostStatement",
    "Credentials",
    "DecodeError",
    "ElectricityCosts",
    "EnergyClass",
    "EonAuth",
    "EonClient",
    "EonError",
    "ErrorKind",
    "GasCosts",
    "HeatCosts",
    "Installation",
    "InstallationMeasurementSeries",
    "MalformedTimestampError",
    "Measurement",
    "MeasurementSeries",
    "MeasurementSet",
    "NoContentError",
    "NoCostDataError",
    "ProductionCosts",
    "Resolution",
    "TokenInfo",
    "TransportError",
    "UnrecognizedCosts",
    "classify_status",
    "decode_cost_statement",
]
