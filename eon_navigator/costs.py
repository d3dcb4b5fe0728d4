"""Cost statements and the decoder for the costs endpoint.

The costs endpoint returns a different line-item shape per energy class
and carries no discriminator besides ``energyClass``:

- electricity and production share one shape, with optional grid details
- heat and cold share another
- gas has its own, with optional bio-gas details

Every monetary figure is optional. A missing figure means "not billed" and
stays None through decoding and ``to_dict``; it is never turned into 0.

When ``energyClass`` is missing or unknown the statement is returned as
UnrecognizedCosts with the raw line items, since decoding them with a
guessed shape would misreport figures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from .errors import DecodeError
from .models import optional_float
from .timecodec import format_timestamp, parse_timestamp

_LOGGER = logging.getLogger(__name__)


class EnergyClass(Enum):
    """Energy class of a cost statement."""

    ELECTRICITY = "electricity"
    PRODUCTION = "production"
    HEAT = "heat"
    COLD = "cold"
    GAS = "gas"


def _money(key: str) -> Any:
    """Declare a nullable figure read from ``key``."""
    return field(default=None, metadata={"key": key})


class _Figures:
    """Decoding of the figures declared with _money."""

    @classmethod
    def _figures_from(cls, data: dict) -> dict:
        return {
            f.name: optional_float(data, f.metadata["key"])
            for f in fields(cls)
            if "key" in f.metadata
        }

    def _figures_to_dict(self) -> dict:
        return {
            f.metadata["key"]: getattr(self, f.name)
            for f in fields(self)
            if "key" in f.metadata
        }


def _details(data: dict, key: str, details_cls):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"{key} is not an object: {value!r}")
    return details_cls.from_api_response(value)


@dataclass
class CostGridDetails(_Figures):
    """Grid fee breakdown of an electricity or production statement."""

    grid_subscription: float | None = _money("gridSubscription")
    grid_subscription_vat: float | None = _money("gridSubscriptionVAT")
    grid_subscribed_effect_reactive_in: float | None = _money(
        "gridSubscribedEffectReactiveIn"
    )
    grid_subscribed_effect_reactive_in_vat: float | None = _money(
        "gridSubscribedEffectReactiveInVAT"
    )
    grid_subscribed_effect_reactive_out: float | None = _money(
        "gridSubscribedEffectReactiveOut"
    )
    grid_subscribed_effect_reactive_out_vat: float | None = _money(
        "gridSubscribedEffectReactiveOutVAT"
    )
    grid_subscribed_effect_winter: float | None = _money("gridSubscribedEffectWinter")
    grid_subscribed_effect_winter_vat: float | None = _money(
        "gridSubscribedEffectWinterVAT"
    )
    grid_subscribed_effect: float | None = _money("gridSubscribedEffect")
    grid_subscribed_effect_vat: float | None = _money("gridSubscribedEffectVAT")
    grid_effect_compensation: float | None = _money("gridEffectCompensation")
    grid_effect_compensation_vat: float | None = _money("gridEffectCompensationVAT")
    grid_effect: float | None = _money("gridEffect")
    grid_effect_vat: float | None = _money("gridEffectVAT")
    grid_compensation_energy: float | None = _money("gridCompensationEnergy")
    grid_compensation_energy_vat: float | None = _money("gridCompensationEnergyVAT")
    grid_exceeded_reactive_effect_out: float | None = _money(
        "gridExceededReactiveEffectOut"
    )
    grid_exceeded_reactive_effect_out_vat: float | None = _money(
        "gridExceededReactiveEffectOutVAT"
    )
    grid_compensation_loss: float | None = _money("gridCompensationLoss")
    grid_compensation_loss_vat: float | None = _money("gridCompensationLossVAT")
    grid_other: float | None = _money("gridOther")
    grid_other_vat: float | None = _money("gridOtherVAT")
    grid_exceeded_active_effect: float | None = _money("gridExceededActiveEffect")
    grid_exceeded_active_effect_vat: float | None = _money(
        "gridExceededActiveEffectVAT"
    )
    grid_fixed: float | None = _money("gridFixed")
    grid_fixed_vat: float | None = _money("gridFixedVAT")
    grid_exceeded_reactive_effect: float | None = _money("gridExceededReactiveEffect")
    grid_exceeded_reactive_effect_vat: float | None = _money(
        "gridExceededReactiveEffectVAT"
    )
    grid_transfer: float | None = _money("gridTransfer")
    grid_transfer_vat: float | None = _money("gridTransferVAT")

    @classmethod
    def from_api_response(cls, data: dict) -> "CostGridDetails":
        return cls(**cls._figures_from(data))

    def to_dict(self) -> dict:
        return self._figures_to_dict()


@dataclass
class CostBioGasDetails(_Figures):
    """Bio-gas tax breakdown of a gas statement."""

    bio_gas_carbon_dioxide_tax: float | None = _money("bioGasCarbonDioxideTax")
    bio_gas_carbon_dioxide_tax_vat: float | None = _money("bioGasCarbonDioxideTaxVAT")
    biogas_energy_tax: float | None = _money("biogasEnergyTax")
    biogas_energy_tax_vat: float | None = _money("biogasEnergyTaxVAT")
    biogas_accumulated_tax: float | None = _money("biogasAccumulatedTax")
    biogas_accumulated_tax_vat: float | None = _money("biogasAccumulatedTaxVAT")

    @classmethod
    def from_api_response(cls, data: dict) -> "CostBioGasDetails":
        return cls(**cls._figures_from(data))

    def to_dict(self) -> dict:
        return self._figures_to_dict()


@dataclass
class ElectricityProductionCost(_Figures):
    """Monthly costs of an electricity or production installation."""

    month: datetime | None = None
    retail_cost: float | None = _money("retailCost")
    retail_cost_vat: float | None = _money("retailCostVAT")
    energy_tax: float | None = _money("energyTax")
    energy_tax_vat: float | None = _money("energyTaxVAT")
    net_cost: float | None = _money("netCost")
    net_cost_vat: float | None = _money("netCostVAT")
    grid_details: CostGridDetails | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "ElectricityProductionCost":
        return cls(
            month=parse_timestamp(data.get("month")),
            grid_details=_details(data, "costGridDetails", CostGridDetails),
            **cls._figures_from(data),
        )

    def to_dict(self) -> dict:
        return {
            "month": format_timestamp(self.month),
            **self._figures_to_dict(),
            "costGridDetails": self.grid_details.to_dict()
            if self.grid_details
            else None,
        }


@dataclass
class HeatColdCost(_Figures):
    """Monthly costs of a heat or cold installation."""

    month: datetime | None = None
    retail_cost: float | None = _money("retailCost")
    retail_cost_vat: float | None = _money("retailCostVAT")
    effect_cost: float | None = _money("effectCost")
    effect_cost_vat: float | None = _money("effectCostVAT")
    energy_cost: float | None = _money("energyCost")
    energy_cost_vat: float | None = _money("energyCostVAT")
    flow_cost: float | None = _money("flowCost")
    flow_cost_vat: float | None = _money("flowCostVAT")

    @classmethod
    def from_api_response(cls, data: dict) -> "HeatColdCost":
        return cls(month=parse_timestamp(data.get("month")), **cls._figures_from(data))

    def to_dict(self) -> dict:
        return {"month": format_timestamp(self.month), **self._figures_to_dict()}


@dataclass
class GasCost(_Figures):
    """Monthly costs of a gas installation."""

    month: datetime | None = None
    retail_cost: float | None = _money("retailCost")
    retail_cost_vat: float | None = _money("retailCostVAT")
    energy_tax: float | None = _money("energyTax")
    energy_tax_vat: float | None = _money("energyTaxVAT")
    bio_gas_details: CostBioGasDetails | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "GasCost":
        return cls(
            month=parse_timestamp(data.get("month")),
            bio_gas_details=_details(data, "costBioGasDetails", CostBioGasDetails),
            **cls._figures_from(data),
        )

    def to_dict(self) -> dict:
        return {
            "month": format_timestamp(self.month),
            **self._figures_to_dict(),
            "costBioGasDetails": self.bio_gas_details.to_dict()
            if self.bio_gas_details
            else None,
        }


@dataclass
class _Statement:
    installation_id: str
    costs: list = field(default_factory=list)

    energy_class: ClassVar[EnergyClass]

    def to_dict(self) -> dict:
        return {
            "energyClass": self.energy_class.value,
            "installation": self.installation_id,
            "costs": [cost.to_dict() for cost in self.costs],
        }


@dataclass
class ElectricityCosts(_Statement):
    costs: list[ElectricityProductionCost] = field(default_factory=list)
    energy_class: ClassVar[EnergyClass] = EnergyClass.ELECTRICITY


@dataclass
class ProductionCosts(_Statement):
    costs: list[ElectricityProductionCost] = field(default_factory=list)
    energy_class: ClassVar[EnergyClass] = EnergyClass.PRODUCTION


@dataclass
class HeatCosts(_Statement):
    costs: list[HeatColdCost] = field(default_factory=list)
    energy_class: ClassVar[EnergyClass] = EnergyClass.HEAT


@dataclass
class ColdCosts(_Statement):
    costs: list[HeatColdCost] = field(default_factory=list)
    energy_class: ClassVar[EnergyClass] = EnergyClass.COLD


@dataclass
class GasCosts(_Statement):
    costs: list[GasCost] = field(default_factory=list)
    energy_class: ClassVar[EnergyClass] = EnergyClass.GAS


_VARIANTS: dict[EnergyClass, tuple[type[_Statement], type]] = {
    EnergyClass.ELECTRICITY: (ElectricityCosts, ElectricityProductionCost),
    EnergyClass.PRODUCTION: (ProductionCosts, ElectricityProductionCost),
    EnergyClass.HEAT: (HeatCosts, HeatColdCost),
    EnergyClass.COLD: (ColdCosts, HeatColdCost),
    EnergyClass.GAS: (GasCosts, GasCost),
}

# Keys only found in one line-item shape
_SHAPE_MARKERS: dict[str, frozenset[str]] = {
    "electricity_production": frozenset({"netCost", "netCostVAT", "costGridDetails"}),
    "heat_cold": frozenset(
        {
            "effectCost",
            "effectCostVAT",
            "energyCost",
            "energyCostVAT",
            "flowCost",
            "flowCostVAT",
        }
    ),
    "gas": frozenset({"costBioGasDetails"}),
}


def infer_cost_shape(costs: list) -> str | None:
    """Name the line-item shape present in raw costs, None if ambiguous."""
    keys: set[str] = set()
    for entry in costs:
        if isinstance(entry, dict):
            keys.update(entry)
    shapes = [shape for shape, markers in _SHAPE_MARKERS.items() if keys & markers]
    if len(shapes) == 1:
        return shapes[0]
    return None


@dataclass
class UnrecognizedCosts:
    """A statement whose energy class is missing or unknown.

    The line items are kept undecoded in raw_costs, as received. shape is
    a hint from the keys present and is never acted on automatically.
    """

    energy_class: str | None
    installation_id: str
    raw_costs: Any = field(default_factory=list)
    shape: str | None = None

    def decode_as(self, energy_class: EnergyClass | str) -> "CostStatement":
        """Decode the raw line items as the given energy class."""
        return _decode_variant(
            EnergyClass(energy_class), self.installation_id, self.raw_costs
        )

    def to_dict(self) -> dict:
        return {
            "energyClass": self.energy_class,
            "installation": self.installation_id,
            "costs": self.raw_costs,
        }


CostStatement = (
    ElectricityCosts
    | ProductionCosts
    | HeatCosts
    | ColdCosts
    | GasCosts
    | UnrecognizedCosts
)


def _decode_variant(
    energy_class: EnergyClass, installation_id: str, costs: Any
) -> CostStatement:
    statement_cls, cost_cls = _VARIANTS[energy_class]
    if not isinstance(costs, list):
        raise DecodeError(
            f"{energy_class.value} costs for installation {installation_id} "
            f"is not a list: {costs!r}"
        )
    try:
        items = [cost_cls.from_api_response(item) for item in costs]
    except (AttributeError, KeyError, TypeError, ValueError) as err:
        raise DecodeError(
            f"invalid {energy_class.value} cost entry for installation "
            f"{installation_id}: {err}"
        ) from err
    return statement_cls(installation_id=installation_id, costs=items)


def decode_cost_statement(payload: Any) -> CostStatement:
    """Decode a costs response into its energy-class variant.

    Raises DecodeError when the payload is not an object or a known
    variant's line items are malformed. A missing or unknown energy
    class yields UnrecognizedCosts instead of an error.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"cost response is not an object: {payload!r}")

    raw_class = payload.get("energyClass")
    installation_id = payload.get("installation") or ""
    costs = payload.get("costs")
    if costs is None:
        costs = []

    normalized = raw_class.strip().lower() if isinstance(raw_class, str) else raw_class
    try:
        energy_class = EnergyClass(normalized)
    except ValueError:
        shape = infer_cost_shape(costs) if isinstance(costs, list) else None
        _LOGGER.warning(
            "Unrecognized energy class %r for installation %s (shape hint: %s)",
            raw_class,
            installation_id,
            shape,
        )
        return UnrecognizedCosts(
            energy_class=raw_class,
            installation_id=installation_id,
            raw_costs=costs,
            shape=shape,
        )

    return _decode_variant(energy_class, installation_id, costs)
