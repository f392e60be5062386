"""Unit tests for catalog.py — lookup, read-only views and data consistency."""
from decimal import Decimal
from typing import get_args

import pytest

from housing_budget.catalog import load_catalog
from housing_budget.config import TIER_ORDER, Tier


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


class TestLookup:
    def test_five_cities(self, catalog):
        assert len(catalog) == 5
        assert catalog.names()[0] == "الرياض"

    @pytest.mark.parametrize("name", ["الرياض", "riyadh", "Riyadh", " riyadh "])
    def test_name_or_alias(self, catalog, name):
        assert catalog.get(name).name == "الرياض"

    def test_unknown(self, catalog):
        assert catalog.get("مدينة غير موجودة") is None
        assert "مدينة غير موجودة" not in catalog
        assert "jeddah" in catalog

    def test_loaded_once(self):
        assert load_catalog() is load_catalog()

    def test_read_only(self, catalog):
        riyadh = catalog.get("riyadh")
        with pytest.raises(TypeError):
            riyadh.regions["new"] = ()
        with pytest.raises(TypeError):
            riyadh.districts[0].offers["apartment"] = None


class TestConsistency:
    def test_tier_alias_matches_order(self):
        assert get_args(Tier) == TIER_ORDER

    def test_tiers_are_known(self, catalog):
        for city in catalog:
            for district in city.districts:
                assert district.tier in TIER_ORDER
            for hoods in city.regions.values():
                assert all(hood.tier in TIER_ORDER for hood in hoods)

    def test_every_region_tier_has_prices(self, catalog):
        for city in catalog:
            for hoods in city.regions.values():
                for hood in hoods:
                    for kind in ("apartment", "duplex", "villa", "land"):
                        assert city.tier_price(kind, hood.tier) is not None, (city.name, kind, hood.tier)

    def test_land_has_no_rent(self, catalog):
        for city in catalog:
            for tier in TIER_ORDER:
                price = city.tier_price("land", tier)
                if price is not None:
                    assert price.rent == Decimal("0")

    def test_scores_in_range(self, catalog):
        for city in catalog:
            for district in city.districts:
                assert 1 <= district.demand_score <= 10
                assert 1 <= district.growth_potential <= 10

    def test_price_for(self, catalog):
        district = catalog.get("riyadh").districts[0]
        assert district.offers["apartment"].price_for(120) == Decimal("624000")
