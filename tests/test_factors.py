"""Tests for the emission factor table and its lookup helpers."""

import dataclasses
import json

import pytest

from ecozync.factors import (
    EMISSION_FACTORS,
    LEGACY_EU_FACTORS,
    LEGACY_WASTE_REDUCTION,
    default_electricity_factor,
    default_transport_factor,
    factor_table_as_dict,
    get_emission_factor,
)


class TestFactorTable:
    def test_has_all_categories(self):
        assert set(EMISSION_FACTORS) == {
            "electricity", "heating", "transport", "aviation", "diet", "consumption", "waste",
        }

    def test_key_values(self):
        assert EMISSION_FACTORS["electricity"]["eu_average"].factor == 0.295
        assert EMISSION_FACTORS["electricity"]["renewable"].factor == 0.020
        assert EMISSION_FACTORS["heating"]["heating_oil"].factor == 0.245
        assert EMISSION_FACTORS["transport"]["car_petrol_medium"].factor == 0.192
        assert EMISSION_FACTORS["transport"]["bus_local"].factor == 0.082
        assert EMISSION_FACTORS["aviation"]["flight_long_economy"].factor == 0.150
        assert EMISSION_FACTORS["diet"]["meat_sometimes"].factor == 2000
        assert EMISSION_FACTORS["waste"]["waste_compost_recycle"].factor == 80

    def test_records_carry_source_metadata(self):
        f = EMISSION_FACTORS["heating"]["natural_gas"]
        assert f.unit == "kg CO2e/kWh"
        assert f.source == "DEFRA 2023"
        assert f.region == "UK"
        assert f.year == 2023

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            EMISSION_FACTORS["diet"] = {}
        with pytest.raises(TypeError):
            EMISSION_FACTORS["diet"]["vegan"] = None
        with pytest.raises(TypeError):
            LEGACY_EU_FACTORS["electricity"] = 0.0

    def test_factor_records_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            EMISSION_FACTORS["diet"]["vegan"].factor = 0

    def test_legacy_waste_multipliers(self):
        assert LEGACY_WASTE_REDUCTION["everything_trash"] == 1.0
        assert LEGACY_WASTE_REDUCTION["compost_too"] == 0.4


class TestLookups:
    def test_get_emission_factor(self):
        assert get_emission_factor("transport", "car_hybrid").factor == 0.109

    def test_get_emission_factor_unknown(self):
        assert get_emission_factor("transport", "rocket") is None
        assert get_emission_factor("spaceflight", "rocket") is None

    @pytest.mark.parametrize("region,expected", [
        ("eu", 0.295), ("Germany", 0.420), ("fr", 0.057),
        ("United Kingdom", 0.193), ("USA", 0.393), ("atlantis", 0.295),
    ])
    def test_default_electricity_factor(self, region, expected):
        assert default_electricity_factor(region).factor == expected

    @pytest.mark.parametrize("mode,expected", [
        ("car_carpool", "car_petrol_medium"), ("public_transport", "bus_local"),
        ("Bike", "bicycle"), ("walking", "walking"), ("hovercraft", "car_petrol_medium"),
    ])
    def test_default_transport_factor(self, mode, expected):
        assert default_transport_factor(mode) is EMISSION_FACTORS["transport"][expected]

    def test_table_as_dict_is_json_serializable(self):
        table = factor_table_as_dict()
        assert table["diet"]["vegan"]["factor"] == 1200
        json.dumps(table)
