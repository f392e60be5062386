"""Unit tests for matcher.py — district search, degradation and scoring."""
from decimal import Decimal

import pytest

from housing_budget import matcher
from housing_budget.catalog import CityCatalog, CityProfile, MarketStats, load_catalog
from housing_budget.matcher import (
    MATCHED,
    NO_DATA,
    NO_MATCH,
    district_score,
    match_property,
    minimum_size,
    target_property_type,
)
from housing_budget.models import (
    REASON_DISTRICT_OUTLOOK, REASON_DOWNGRADED, REASON_FAMILY_FIT, REASON_NEAR_WORK,
    REASON_NO_DATA, REASON_NO_MATCH, REASON_SAFETY_MARGIN,
)

RIYADH = "الرياض"
SOUTH_RIYADH = "جنوب الرياض"


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


def _codes(match):
    return [reason.code for reason in match.reasons]


class TestTargets:
    @pytest.mark.parametrize("family,rooms,expected", [
        (6, 1, "villa"),
        (1, 4, "villa"),
        (4, 1, "duplex"),
        (1, 3, "duplex"),
        (3, 2, "apartment"),
        (1, 1, "apartment"),
    ])
    def test_property_type(self, family, rooms, expected):
        assert target_property_type(family, rooms) == expected

    @pytest.mark.parametrize("kind,rooms,expected", [
        ("apartment", 1, 90),
        ("apartment", 2, 120),
        ("apartment", 3, 150),
        ("duplex", 3, 220),
        ("villa", 5, 300),
    ])
    def test_minimum_size(self, kind, rooms, expected):
        assert minimum_size(kind, rooms) == expected


class TestDistrictScore:
    def test_proximity_dominates(self, catalog):
        riyadh = catalog.get(RIYADH)
        shifa = next(d for d in riyadh.districts if d.name == "حي الشفا")
        # 60 + 6×2.5 + 7×1.5
        assert district_score(shifa, {"حي الشفا"}) == Decimal("85.5")
        assert district_score(shifa, ()) == Decimal("25.5")


class TestMatchProperty:
    def test_unknown_city_returns_no_data(self, catalog):
        match = match_property(catalog, "مدينة غير موجودة", "", Decimal("1000000"), 3, 2)
        assert match.status == NO_DATA
        assert not match.found
        assert _codes(match) == [REASON_NO_DATA]
        assert match.reasons[0].params["city"] == "مدينة غير موجودة"

    def test_apartment_near_work(self, catalog):
        match = match_property(catalog, RIYADH, SOUTH_RIYADH, Decimal("1000000"), 2, 2)
        assert match.status == MATCHED
        # النسيم and الشفا tie on score; catalog order wins
        assert match.district == "حي النسيم"
        assert match.property_type == "apartment"
        assert match.size == 120
        assert match.price == Decimal("456000")
        # 456000 × 0.05 / 12
        assert match.monthly_rent == Decimal("1900")
        assert _codes(match) == [
            REASON_NEAR_WORK, REASON_FAMILY_FIT, REASON_DISTRICT_OUTLOOK, REASON_SAFETY_MARGIN,
        ]

    def test_alias_lookup(self, catalog):
        match = match_property(catalog, "riyadh", SOUTH_RIYADH, Decimal("1000000"), 2, 2)
        assert match.district == "حي النسيم"

    def test_degrades_villa_to_apartment(self, catalog):
        match = match_property(catalog, RIYADH, "", Decimal("500000"), 6, 4)
        assert match.status == MATCHED
        assert match.property_type == "apartment"
        assert match.price <= Decimal("500000")
        assert _codes(match) == [REASON_FAMILY_FIT, REASON_DISTRICT_OUTLOOK, REASON_DOWNGRADED]
        downgrade = match.reasons[-1].params
        assert downgrade["requested_type"] == "villa"
        assert downgrade["requested_rooms"] == 4
        assert downgrade["rooms"] == 2

    def test_no_match_when_nothing_fits(self, catalog):
        match = match_property(catalog, RIYADH, SOUTH_RIYADH, Decimal("1000"), 8, 5)
        assert match.status == NO_MATCH
        assert _codes(match) == [REASON_NO_MATCH]

    @pytest.mark.parametrize("family,rooms", [(1, 1), (2, 2), (4, 3), (6, 4), (8, 5)])
    def test_attempts_bounded_by_required_rooms(self, catalog, monkeypatch, family, rooms):
        calls = []
        search = matcher._candidates

        def counting(*args):
            calls.append(args[1])
            return search(*args)

        monkeypatch.setattr(matcher, "_candidates", counting)
        match = match_property(catalog, RIYADH, SOUTH_RIYADH, Decimal("1000"), family, rooms)
        assert match.status == NO_MATCH
        assert len(calls) == rooms

    @pytest.mark.parametrize("budget", ["350000", "450000", "500000", "600000", "700000"])
    @pytest.mark.parametrize("family,rooms", [(6, 4), (6, 5), (8, 5), (4, 3), (3, 2)])
    def test_downgrade_keeps_at_least_one_room(self, catalog, budget, family, rooms):
        match = match_property(catalog, RIYADH, "", Decimal(budget), family, rooms)
        for reason in match.reasons:
            if reason.code == REASON_DOWNGRADED:
                assert 1 <= reason.params["rooms"] < rooms

    def test_large_family_single_room_gets_one_villa_attempt(self, catalog):
        # an apartment would fit this budget, but one room allows only the villa attempt
        assert match_property(catalog, RIYADH, "", Decimal("600000"), 1, 1).found
        match = match_property(catalog, RIYADH, "", Decimal("600000"), 6, 1)
        assert match.status == NO_MATCH

    def test_falls_back_to_all_districts_when_none_near(self, catalog):
        # north Riyadh districts start at 550000 for an apartment
        match = match_property(catalog, RIYADH, "شمال الرياض", Decimal("450000"), 1, 1)
        assert match.found
        assert REASON_NEAR_WORK not in _codes(match)

    @pytest.mark.parametrize("budget", ["300000", "450000", "700000", "1200000", "2500000", "5000000"])
    @pytest.mark.parametrize("family,rooms", [(1, 1), (3, 2), (4, 3), (7, 5)])
    def test_price_never_exceeds_budget(self, catalog, budget, family, rooms):
        for profile in catalog:
            for region in [""] + list(profile.nearby):
                match = match_property(catalog, profile.name, region, Decimal(budget), family, rooms)
                assert match.status in (MATCHED, NO_MATCH)
                if match.found:
                    assert match.price <= Decimal(budget)

    def test_empty_city_returns_no_match(self):
        empty = CityProfile(
            name="X", alias="x",
            market=MarketStats(Decimal("1"), Decimal("0"), Decimal("0"), Decimal("0"), "medium", ""),
            districts=(), regions={}, tier_prices={}, nearby={},
        )
        match = match_property(CityCatalog([empty]), "X", "", Decimal("1000000"), 3, 3)
        assert match.status == NO_MATCH
