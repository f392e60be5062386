"""Static city catalog: districts, price tables and work-region proximity.

All prices are in SAR and stored as Decimal.
The catalog is built once (load_catalog is cached) and exposed read-only;
every calculator takes it as an argument so tests can inject their own.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from .config import Tier


@dataclass(frozen=True)
class PropertyOffer:
    price_per_area: Decimal
    available_sizes: tuple[int, ...]

    def price_for(self, size: int) -> Decimal:
        return self.price_per_area * Decimal(size)


@dataclass(frozen=True)
class District:
    name: str
    tier: Tier
    area: str
    demand_score: int        # 1-10
    growth_potential: int    # 1-10
    offers: Mapping[str, PropertyOffer]


@dataclass(frozen=True)
class TierPrice:
    price: Decimal
    size: int
    rent: Decimal            # monthly; 0 for land


@dataclass(frozen=True)
class Neighborhood:
    name: str
    tier: Tier


@dataclass(frozen=True)
class MarketStats:
    average_price: Decimal
    inflation_rate: Decimal  # annual real-estate inflation, fraction
    rent_yield: Decimal
    growth_rate: Decimal
    demand_level: str        # medium / high / very-high
    description: str


@dataclass(frozen=True)
class CityProfile:
    name: str
    alias: str
    market: MarketStats
    districts: tuple[District, ...]
    regions: Mapping[str, tuple[Neighborhood, ...]]
    tier_prices: Mapping[str, Mapping[str, TierPrice]]
    nearby: Mapping[str, tuple[str, ...]]

    def districts_near(self, region: str) -> tuple[str, ...]:
        return self.nearby.get(region, ())

    def neighborhoods(self, region: str) -> tuple[Neighborhood, ...]:
        return self.regions.get(region, ())

    def tier_price(self, property_type: str, tier: str) -> Optional[TierPrice]:
        return self.tier_prices.get(property_type, {}).get(tier)


class CityCatalog:
    """Read-only mapping of city name → CityProfile, also reachable by alias."""

    def __init__(self, cities: Iterable[CityProfile]) -> None:
        ordered = {city.name: city for city in cities}
        self._cities: Mapping[str, CityProfile] = MappingProxyType(ordered)
        self._aliases: Mapping[str, str] = MappingProxyType(
            {city.alias.lower(): city.name for city in ordered.values() if city.alias}
        )

    def get(self, name: str) -> Optional[CityProfile]:
        key = name.strip()
        if key in self._cities:
            return self._cities[key]
        canonical = self._aliases.get(key.lower())
        return self._cities[canonical] if canonical else None

    def names(self) -> tuple[str, ...]:
        return tuple(self._cities)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[CityProfile]:
        return iter(self._cities.values())

    def __len__(self) -> int:
        return len(self._cities)


# ── Builders ──────────────────────────────────────────────────────────────────

def _district(
    name: str,
    tier: str,
    area: str,
    demand: int,
    growth: int,
    *,
    apartment: tuple[int, tuple[int, ...]],
    villa: tuple[int, tuple[int, ...]],
    duplex: tuple[int, tuple[int, ...]],
) -> District:
    offers = {
        kind: PropertyOffer(Decimal(ppa), sizes)
        for kind, (ppa, sizes) in (
            ("apartment", apartment), ("villa", villa), ("duplex", duplex)
        )
    }
    return District(name, tier, area, demand, growth, MappingProxyType(offers))


def _tiers(table: dict[str, dict[str, tuple[int, int, int]]]) -> Mapping[str, Mapping[str, TierPrice]]:
    return MappingProxyType({
        kind: MappingProxyType({
            tier: TierPrice(Decimal(price), size, Decimal(rent))
            for tier, (price, size, rent) in by_tier.items()
        })
        for kind, by_tier in table.items()
    })


def _regions(table: dict[str, list[tuple[str, str]]]) -> Mapping[str, tuple[Neighborhood, ...]]:
    return MappingProxyType({
        region: tuple(Neighborhood(name, tier) for name, tier in entries)
        for region, entries in table.items()
    })


def _nearby(table: dict[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({region: tuple(names) for region, names in table.items()})


# ── Riyadh ────────────────────────────────────────────────────────────────────

_RIYADH = CityProfile(
    name="الرياض",
    alias="riyadh",
    market=MarketStats(
        average_price=Decimal("950000"),
        inflation_rate=Decimal("0.05"),
        rent_yield=Decimal("0.05"),
        growth_rate=Decimal("0.08"),
        demand_level="high",
        description="Active market with prices varying strongly by district",
    ),
    districts=(
        _district("حي النرجس", "luxury", "شمال", 8, 9,
                  apartment=(5200, (120, 150, 180)), villa=(4800, (350, 450, 550)),
                  duplex=(5000, (250, 300, 350))),
        _district("حي الياسمين", "premium", "شمال", 8, 8,
                  apartment=(5000, (110, 140, 170)), villa=(4700, (320, 420, 520)),
                  duplex=(4900, (240, 290, 340))),
        _district("حي الملقا", "luxury", "شمال", 9, 8,
                  apartment=(5500, (130, 160, 190)), villa=(5200, (400, 500, 600)),
                  duplex=(5300, (270, 320, 370))),
        _district("حي العليا", "luxury", "غرب", 9, 7,
                  apartment=(6500, (100, 130, 160)), villa=(6200, (450, 550, 650)),
                  duplex=(6300, (300, 350, 400))),
        _district("حي اليرموك", "standard", "شرق", 7, 8,
                  apartment=(4200, (100, 130, 160)), villa=(3900, (300, 400, 500)),
                  duplex=(4000, (220, 270, 320))),
        _district("حي الصحافة", "premium", "غرب", 8, 8,
                  apartment=(5000, (110, 140, 170)), villa=(4700, (350, 450, 550)),
                  duplex=(4800, (250, 300, 350))),
        _district("حي النسيم", "budget", "جنوب", 6, 7,
                  apartment=(3800, (90, 120, 150)), villa=(3500, (300, 400, 500)),
                  duplex=(3600, (220, 270, 320))),
        _district("حي الشفا", "standard", "جنوب", 6, 7,
                  apartment=(3600, (90, 120, 150)), villa=(3300, (300, 400, 500)),
                  duplex=(3400, (220, 270, 320))),
    ),
    regions=_regions({
        "شمال الرياض": [("القيروان", "premium"), ("النرجس", "luxury"), ("الياسمين", "premium"),
                        ("الملقا", "luxury"), ("النفل", "standard")],
        "جنوب الرياض": [("الشفا", "standard"), ("العزيزية", "standard"), ("النسيم", "budget"),
                        ("الدار البيضاء", "standard"), ("الفيحاء", "budget")],
        "شرق الرياض": [("الروضة", "premium"), ("الرواد", "standard"), ("الربيع", "standard"),
                       ("الريان", "standard"), ("النهضة", "budget")],
        "غرب الرياض": [("العقيق", "luxury"), ("الصحافة", "premium"), ("العليا", "luxury"),
                       ("الرحمانية", "standard"), ("عرقة", "standard")],
        "وسط الرياض": [("الديرة", "heritage"), ("المرقب", "standard"), ("العود", "standard"),
                       ("المربع", "budget"), ("الرميلة", "budget")],
    }),
    tier_prices=_tiers({
        "land": {
            "luxury": (500000, 600, 0), "premium": (350000, 500, 0),
            "standard": (250000, 400, 0), "budget": (180000, 300, 0),
            "heritage": (220000, 350, 0),
        },
        "apartment": {
            "luxury": (950000, 140, 4500), "premium": (750000, 120, 3500),
            "standard": (580000, 100, 2800), "budget": (420000, 80, 2200),
            "heritage": (380000, 90, 2000),
        },
        "duplex": {
            "luxury": (1800000, 280, 8500), "premium": (1400000, 250, 7000),
            "standard": (1100000, 220, 5500), "budget": (850000, 200, 4500),
            "heritage": (900000, 230, 4800),
        },
        "villa": {
            "luxury": (3500000, 450, 16000), "premium": (2500000, 400, 12000),
            "standard": (1800000, 350, 9000), "budget": (1400000, 300, 7000),
            "heritage": (1600000, 320, 8000),
        },
    }),
    nearby=_nearby({
        "شمال الرياض": ["حي النرجس", "حي الياسمين", "حي الملقا", "حي القيروان", "حي النفل"],
        "جنوب الرياض": ["حي الشفا", "حي العزيزية", "حي النسيم", "حي الدار البيضاء", "حي الفيحاء"],
        "شرق الرياض": ["حي الروضة", "حي الرواد", "حي الربيع", "حي الريان", "حي النهضة"],
        "غرب الرياض": ["حي عرقة", "حي العقيق", "حي الصحافة", "حي العليا", "حي الرحمانية"],
        "وسط الرياض": ["حي الديرة", "حي المرقب", "حي العود", "حي المربع", "حي الرميلة"],
    }),
)

# ── Jeddah ────────────────────────────────────────────────────────────────────

_JEDDAH = CityProfile(
    name="جدة",
    alias="jeddah",
    market=MarketStats(
        average_price=Decimal("850000"),
        inflation_rate=Decimal("0.04"),
        rent_yield=Decimal("0.055"),
        growth_rate=Decimal("0.06"),
        demand_level="high",
        description="Coastal city with a wide range of housing options",
    ),
    districts=(
        _district("حي الشاطئ", "luxury", "شمال", 9, 8,
                  apartment=(5800, (110, 140, 170)), villa=(5500, (350, 450, 550)),
                  duplex=(5600, (250, 300, 350))),
        _district("حي الروضة", "premium", "شرق", 8, 7,
                  apartment=(5000, (100, 130, 160)), villa=(4700, (320, 420, 520)),
                  duplex=(4800, (240, 290, 340))),
        _district("حي السلامة", "premium", "غرب", 7, 7,
                  apartment=(4700, (100, 130, 160)), villa=(4400, (320, 420, 520)),
                  duplex=(4500, (240, 290, 340))),
    ),
    regions=_regions({
        "شمال جدة": [("الشاطئ", "luxury"), ("أبحر", "luxury"), ("ذهبان", "premium"),
                     ("النعيم", "standard"), ("الفيصلية", "premium")],
        "جنوب جدة": [("البوادي", "budget"), ("العزيزية", "standard"), ("القريات", "budget"),
                     ("المحاميد", "budget"), ("الحرازات", "standard")],
        "شرق جدة": [("النزهة", "premium"), ("الروضة", "premium"), ("الفيصلية", "premium"),
                    ("النخيل", "standard"), ("الروابي", "standard")],
        "غرب جدة": [("البلد", "heritage"), ("الشرفية", "standard"), ("الحمراء", "standard"),
                    ("الزهراء", "standard"), ("السلامة", "premium")],
        "وسط جدة": [("العزيزية", "standard"), ("الروضة", "premium"), ("الفيصلية", "premium"),
                    ("النزهة", "premium"), ("الصفا", "standard")],
    }),
    tier_prices=_tiers({
        "land": {
            "luxury": (450000, 600, 0), "premium": (320000, 500, 0),
            "standard": (220000, 400, 0), "budget": (160000, 300, 0),
            "heritage": (200000, 350, 0),
        },
        "apartment": {
            "luxury": (850000, 130, 4200), "premium": (650000, 110, 3200),
            "standard": (500000, 95, 2600), "budget": (380000, 75, 2000),
            "heritage": (350000, 85, 1900),
        },
        "duplex": {
            "luxury": (1600000, 270, 7800), "premium": (1250000, 240, 6500),
            "standard": (950000, 210, 5000), "budget": (750000, 190, 4000),
            "heritage": (800000, 220, 4300),
        },
        "villa": {
            "luxury": (3200000, 420, 15000), "premium": (2200000, 380, 11000),
            "standard": (1600000, 330, 8000), "budget": (1200000, 280, 6500),
            "heritage": (1400000, 300, 7500),
        },
    }),
    nearby=_nearby({
        "شمال جدة": ["حي الشاطئ", "حي أبحر", "حي ذهبان", "حي النعيم", "حي الفيصلية"],
        "جنوب جدة": ["حي البوادي", "حي العزيزية", "حي القريات", "حي المحاميد", "حي الحرازات"],
        "شرق جدة": ["حي النزهة", "حي الروضة", "حي الفيصلية", "حي النخيل", "حي الروابي"],
        "غرب جدة": ["حي البلد", "حي الشرفية", "حي الحمراء", "حي الزهراء", "حي السلامة"],
        "وسط جدة": ["حي العزيزية", "حي الروضة", "حي الفيصلية", "حي النزهة", "حي الصفا"],
    }),
)

# ── Makkah ────────────────────────────────────────────────────────────────────

_MAKKAH = CityProfile(
    name="مكة المكرمة",
    alias="makkah",
    market=MarketStats(
        average_price=Decimal("1200000"),
        inflation_rate=Decimal("0.06"),
        rent_yield=Decimal("0.06"),
        growth_rate=Decimal("0.09"),
        demand_level="very-high",
        description="High prices, especially close to the Grand Mosque",
    ),
    districts=(
        _district("العزيزية", "luxury", "وسط", 9, 8,
                  apartment=(7000, (90, 120, 150)), villa=(6700, (350, 450, 550)),
                  duplex=(6800, (250, 300, 350))),
        _district("الششة", "standard", "وسط", 7, 7,
                  apartment=(5000, (90, 120, 150)), villa=(4700, (300, 400, 500)),
                  duplex=(4800, (220, 270, 320))),
    ),
    regions=_regions({
        "المنطقة المركزية": [("العزيزية", "luxury"), ("النسيم", "standard"), ("العوالي", "budget"),
                             ("الششة", "standard"), ("الضيافة", "premium")],
        "العزيزية": [("الششة", "standard"), ("النسيم", "standard"), ("الحجون", "heritage"),
                     ("التيسير", "budget"), ("المرسلات", "budget")],
        "الششة": [("العزيزية", "premium"), ("النسيم", "standard"), ("الضيافة", "premium"),
                  ("العوالي", "budget"), ("المرسلات", "budget")],
        "النسيم": [("الششة", "standard"), ("العزيزية", "premium"), ("العوالي", "budget"),
                   ("الضيافة", "premium"), ("المرسلات", "budget")],
        "العوالي": [("الششة", "standard"), ("النسيم", "standard"), ("الضيافة", "premium"),
                    ("المرسلات", "budget"), ("التيسير", "budget")],
    }),
    tier_prices=_tiers({
        "land": {
            "luxury": (600000, 500, 0), "premium": (400000, 450, 0),
            "standard": (280000, 350, 0), "budget": (200000, 250, 0),
            "heritage": (320000, 300, 0),
        },
        "apartment": {
            "luxury": (1200000, 110, 5500), "premium": (900000, 100, 4200),
            "standard": (650000, 85, 3200), "budget": (480000, 70, 2500),
            "heritage": (550000, 80, 2800),
        },
        "duplex": {
            "luxury": (2200000, 240, 10500), "premium": (1650000, 220, 8000),
            "standard": (1200000, 190, 6000), "budget": (950000, 170, 4800),
            "heritage": (1100000, 180, 5500),
        },
        "villa": {
            "luxury": (4200000, 380, 19000), "premium": (2800000, 350, 14000),
            "standard": (2000000, 300, 10000), "budget": (1500000, 250, 7500),
            "heritage": (1800000, 280, 9000),
        },
    }),
    nearby=_nearby({
        "المنطقة المركزية": ["العزيزية", "النسيم", "العوالي", "الششة", "الضيافة"],
        "العزيزية": ["الششة", "النسيم", "الحجون", "التيسير", "المرسلات"],
        "الششة": ["العزيزية", "النسيم", "الضيافة", "العوالي", "المرسلات"],
        "النسيم": ["الششة", "العزيزية", "العوالي", "الضيافة", "المرسلات"],
        "العوالي": ["الششة", "النسيم", "الضيافة", "المرسلات", "التيسير"],
    }),
)

# ── Madinah ───────────────────────────────────────────────────────────────────

_MADINAH = CityProfile(
    name="المدينة المنورة",
    alias="madinah",
    market=MarketStats(
        average_price=Decimal("800000"),
        inflation_rate=Decimal("0.045"),
        rent_yield=Decimal("0.055"),
        growth_rate=Decimal("0.07"),
        demand_level="high",
        description="Moderate prices, rising near the Prophet's Mosque",
    ),
    districts=(
        _district("قباء", "premium", "وسط", 8, 8,
                  apartment=(4600, (100, 130, 160)), villa=(4300, (320, 420, 520)),
                  duplex=(4400, (240, 290, 340))),
    ),
    regions=_regions({
        "المنطقة المركزية": [("قباء", "premium"), ("العوالي", "standard"), ("الحرة الشرقية", "standard"),
                             ("النخيل", "budget"), ("بني حارثة", "budget")],
        "قباء": [("العوالي", "standard"), ("الحرة الشرقية", "standard"), ("النخيل", "budget"),
                 ("بني حارثة", "budget"), ("الأنصار", "standard")],
        "العوالي": [("قباء", "premium"), ("الحرة الشرقية", "standard"), ("النخيل", "budget"),
                    ("بني حارثة", "budget"), ("الأنصار", "standard")],
        "الحرة الشرقية": [("قباء", "premium"), ("العوالي", "standard"), ("النخيل", "budget"),
                          ("بني حارثة", "budget"), ("الأنصار", "standard")],
        "النخيل": [("قباء", "premium"), ("العوالي", "standard"), ("الحرة الشرقية", "standard"),
                   ("بني حارثة", "budget"), ("الأنصار", "standard")],
    }),
    tier_prices=_tiers({
        "land": {
            "luxury": (380000, 500, 0), "premium": (280000, 450, 0),
            "standard": (200000, 350, 0), "budget": (140000, 250, 0),
            "heritage": (180000, 300, 0),
        },
        "apartment": {
            "luxury": (750000, 120, 3500), "premium": (580000, 115, 2800),
            "standard": (420000, 95, 2200), "budget": (320000, 80, 1700),
            "heritage": (360000, 85, 1900),
        },
        "duplex": {
            "luxury": (1400000, 250, 6800), "premium": (1100000, 230, 5500),
            "standard": (850000, 200, 4200), "budget": (650000, 180, 3300),
            "heritage": (750000, 190, 3800),
        },
        "villa": {
            "luxury": (2500000, 400, 12000), "premium": (1800000, 370, 9000),
            "standard": (1300000, 320, 6500), "budget": (1000000, 280, 5000),
            "heritage": (1200000, 300, 6000),
        },
    }),
    nearby=_nearby({}),
)

# ── Dammam ────────────────────────────────────────────────────────────────────

_DAMMAM = CityProfile(
    name="الدمام",
    alias="dammam",
    market=MarketStats(
        average_price=Decimal("750000"),
        inflation_rate=Decimal("0.035"),
        rent_yield=Decimal("0.06"),
        growth_rate=Decimal("0.05"),
        demand_level="medium",
        description="Industrial city with reasonable property prices",
    ),
    districts=(
        _district("حي الشاطئ", "luxury", "شمال", 8, 8,
                  apartment=(4400, (110, 140, 170)), villa=(4100, (350, 450, 550)),
                  duplex=(4200, (250, 300, 350))),
    ),
    regions=_regions({
        "شمال الدمام": [("الشاطئ", "luxury"), ("الحمراء", "premium"), ("النورس", "premium"),
                        ("الناصرية", "standard"), ("طيبة", "standard")],
        "جنوب الدمام": [("عبد الله فؤاد", "standard"), ("الفيصلية", "standard"), ("البادية", "budget"),
                        ("غرناطة", "premium"), ("الجلوية", "budget")],
        "شرق الدمام": [("الشاطئ", "luxury"), ("البحيرة", "premium"), ("الهدا", "standard"),
                       ("المنار", "standard"), ("الصفا", "standard")],
        "غرب الدمام": [("النزهة", "premium"), ("الروضة", "premium"), ("الفنار", "standard"),
                       ("أحد", "budget"), ("المزروعية", "budget")],
        "وسط الدمام": [("الطبيشي", "heritage"), ("القزاز", "standard"), ("الدواسر", "standard"),
                       ("الخليج", "premium"), ("الفيصلية", "standard")],
    }),
    tier_prices=_tiers({
        "land": {
            "luxury": (320000, 500, 0), "premium": (240000, 450, 0),
            "standard": (180000, 350, 0), "budget": (120000, 250, 0),
            "heritage": (150000, 300, 0),
        },
        "apartment": {
            "luxury": (650000, 125, 3200), "premium": (480000, 110, 2500),
            "standard": (350000, 95, 1900), "budget": (280000, 80, 1500),
            "heritage": (300000, 85, 1600),
        },
        "duplex": {
            "luxury": (1200000, 250, 6000), "premium": (950000, 230, 4800),
            "standard": (720000, 200, 3600), "budget": (550000, 180, 2800),
            "heritage": (650000, 190, 3200),
        },
        "villa": {
            "luxury": (2200000, 400, 11000), "premium": (1600000, 370, 8000),
            "standard": (1200000, 320, 6000), "budget": (900000, 280, 4500),
            "heritage": (1100000, 300, 5500),
        },
    }),
    nearby=_nearby({
        "شمال الدمام": ["حي الشاطئ", "حي الحمراء", "حي النورس", "حي الناصرية", "حي طيبة"],
        "جنوب الدمام": ["حي عبد الله فؤاد", "حي الفيصلية", "حي البادية", "حي غرناطة", "حي الجلوية"],
        "شرق الدمام": ["حي الشاطئ", "حي البحيرة", "حي الهدا", "حي المنار", "حي الصفا"],
        "غرب الدمام": ["حي النزهة", "حي الروضة", "حي الفنار", "حي أحد", "حي المزروعية"],
        "وسط الدمام": ["حي الطبيشي", "حي القزاز", "حي الدواسر", "حي الخليج", "حي الفيصلية"],
    }),
)


@lru_cache(maxsize=None)
def load_catalog() -> CityCatalog:
    """Return the built-in catalog (constructed once per process)."""
    return CityCatalog((_RIYADH, _JEDDAH, _MAKKAH, _MADINAH, _DAMMAM))
