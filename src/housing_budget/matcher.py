"""Best-match property search over the district catalog.

Search order:
1. Map family size / required rooms to a target property type and minimum size.
2. Keep districts offering that type at a fitting size within budget,
   preferring those near the work region when any qualify.
3. If nothing fits, relax: next smaller property type and one room fewer.
   The loop runs at most `required_rooms` times.
4. Rank survivors by proximity, demand and growth; ties keep catalog order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Collection, Literal, Optional

from .calculator import round_whole
from .catalog import CityCatalog, CityProfile, District
from .config import (
    APARTMENT_BASE_SIZE, APARTMENT_SIZE_PER_ROOM, DEFAULT_POLICY, DEMAND_WEIGHT,
    DUPLEX_FAMILY_SIZE, DUPLEX_MIN_SIZE, DUPLEX_ROOMS, GROWTH_WEIGHT, NEAR_WORK_POINTS,
    VILLA_FAMILY_SIZE, VILLA_MIN_SIZE, VILLA_ROOMS, ZERO, AffordabilityPolicy, PropertyType,
    Tier,
)
from .models import (
    REASON_DISTRICT_OUTLOOK, REASON_DOWNGRADED, REASON_FAMILY_FIT, REASON_NEAR_WORK,
    REASON_NO_DATA, REASON_NO_MATCH, REASON_SAFETY_MARGIN, Reason,
)

logger = logging.getLogger(__name__)

MATCHED = "matched"
NO_DATA = "no_data"
NO_MATCH = "no_match"

_TYPE_RANK = {"apartment": 0, "duplex": 1, "villa": 2}
_SMALLER_TYPE = {"villa": "duplex", "duplex": "apartment", "apartment": "apartment"}


@dataclass(frozen=True)
class PropertyMatch:
    status: str
    district: str = ""
    tier: Tier | Literal[""] = ""
    property_type: PropertyType | Literal[""] = ""
    size: int = 0
    price: Decimal = ZERO
    monthly_rent: Decimal = ZERO
    reasons: tuple[Reason, ...] = ()

    @property
    def found(self) -> bool:
        return self.status == MATCHED


def target_property_type(family_size: int, rooms: int) -> PropertyType:
    if family_size >= VILLA_FAMILY_SIZE or rooms >= VILLA_ROOMS:
        return "villa"
    if family_size >= DUPLEX_FAMILY_SIZE or rooms >= DUPLEX_ROOMS:
        return "duplex"
    return "apartment"


def minimum_size(property_type: PropertyType, rooms: int) -> int:
    if property_type == "villa":
        return VILLA_MIN_SIZE
    if property_type == "duplex":
        return DUPLEX_MIN_SIZE
    return max(APARTMENT_BASE_SIZE, APARTMENT_BASE_SIZE + APARTMENT_SIZE_PER_ROOM * (rooms - 1))


def district_score(district: District, nearby: Collection[str]) -> Decimal:
    near = NEAR_WORK_POINTS if district.name in nearby else ZERO
    return near + district.demand_score * DEMAND_WEIGHT + district.growth_potential * GROWTH_WEIGHT


def _fitting_size(district: District, property_type: str, min_size: int) -> Optional[int]:
    offer = district.offers.get(property_type)
    if offer is None:
        return None
    sizes = [size for size in offer.available_sizes if size >= min_size]
    return min(sizes) if sizes else None


def _candidates(
    city: CityProfile,
    property_type: str,
    min_size: int,
    budget: Decimal,
    nearby: Collection[str],
) -> list[tuple[District, int]]:
    fits = []
    for district in city.districts:
        size = _fitting_size(district, property_type, min_size)
        if size is None:
            continue
        if district.offers[property_type].price_for(size) <= budget:
            fits.append((district, size))
    near = [(d, size) for d, size in fits if d.name in nearby]
    return near or fits


def match_property(
    catalog: CityCatalog,
    city: str,
    work_location: str,
    budget: Decimal,
    family_size: int,
    required_rooms: int,
    policy: Optional[AffordabilityPolicy] = None,
) -> PropertyMatch:
    """Return the best affordable property, or an explicit no_data / no_match result."""
    policy = policy or DEFAULT_POLICY
    profile = catalog.get(city)
    if profile is None:
        logger.debug("No catalog entry for city %r", city)
        return PropertyMatch(status=NO_DATA, reasons=(Reason.of(REASON_NO_DATA, city=city),))

    nearby = frozenset(profile.districts_near(work_location))
    requested_type = target_property_type(family_size, required_rooms)
    ceiling = requested_type
    rooms = required_rooms
    candidates: list[tuple[District, int]] = []
    property_type = requested_type

    for _ in range(max(0, required_rooms)):
        property_type = target_property_type(family_size, rooms)
        if _TYPE_RANK[property_type] > _TYPE_RANK[ceiling]:
            property_type = ceiling
        min_size = minimum_size(property_type, rooms)
        candidates = _candidates(profile, property_type, min_size, budget, nearby)
        if candidates:
            break
        logger.debug(
            "No %s of %d m² within %s in %s; relaxing to %d rooms",
            property_type, min_size, budget, profile.name, rooms - 1,
        )
        ceiling = _SMALLER_TYPE[property_type]
        rooms -= 1

    if not candidates:
        return PropertyMatch(status=NO_MATCH, reasons=(Reason.of(REASON_NO_MATCH),))

    best, size = max(candidates, key=lambda candidate: district_score(candidate[0], nearby))
    price = best.offers[property_type].price_for(size)
    rent = round_whole(price * policy.rental_yield / 12)
    logger.debug("Matched %s %s (%d m²) at %s", best.name, property_type, size, price)

    reasons: list[Reason] = []
    if best.name in nearby:
        reasons.append(Reason.of(REASON_NEAR_WORK, region=work_location))
    reasons.append(Reason.of(REASON_FAMILY_FIT, family_size=family_size, rooms=rooms))
    reasons.append(Reason.of(
        REASON_DISTRICT_OUTLOOK,
        district=best.name, demand=best.demand_score, growth=best.growth_potential,
    ))
    if price <= budget * policy.safety_margin_ratio:
        reasons.append(Reason.of(REASON_SAFETY_MARGIN))
    if property_type != requested_type or rooms != required_rooms:
        reasons.append(Reason.of(
            REASON_DOWNGRADED,
            requested_type=requested_type, property_type=property_type,
            requested_rooms=required_rooms, rooms=rooms,
        ))

    return PropertyMatch(
        status=MATCHED,
        district=best.name,
        tier=best.tier,
        property_type=property_type,
        size=size,
        price=price,
        monthly_rent=rent,
        reasons=tuple(reasons),
    )
