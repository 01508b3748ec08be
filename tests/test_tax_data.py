"""Tests for tax table loading and validation."""

from decimal import Decimal
from pathlib import Path

import pytest

from src.calculators.errors import ConfigurationError
from src.calculators.tax_data import (
    RebateSchedule,
    TaxBracket,
    TaxTable,
    available_tax_years,
    load_tax_table,
    parse_tax_table,
)


class TestShippedTables:
    def test_available_years(self) -> None:
        assert available_tax_years() == ["2024-25", "2025-26"]

    def test_2025_26_brackets(self, tax_table: TaxTable) -> None:
        assert tax_table.tax_year == "2025-26"
        assert len(tax_table.brackets) == 7
        assert tax_table.brackets[0] == TaxBracket(Decimal("0"), Decimal("237100"), Decimal("0.18"))
        assert tax_table.brackets[-1].upper is None
        assert tax_table.brackets[-1].rate == Decimal("0.45")

    def test_rebates_and_levies(self, tax_table: TaxTable) -> None:
        assert tax_table.rebates == RebateSchedule(
            Decimal("17235"), Decimal("9444"), Decimal("3145")
        )
        assert tax_table.statutory.uif_rate == Decimal("0.01")
        assert tax_table.statutory.uif_monthly_cap == Decimal("177.12")
        assert tax_table.statutory.sdl_rate == Decimal("0.01")

    def test_years_share_brackets(self) -> None:
        assert load_tax_table("2024-25").brackets == load_tax_table("2025-26").brackets

    def test_unknown_year(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown tax year: 2099-00"):
            load_tax_table("2099-00")


class TestRebateSchedule:
    schedule = RebateSchedule(Decimal("100"), Decimal("50"), Decimal("25"))

    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (None, "100"),
            (0, "100"),
            (64, "100"),
            (65, "150"),
            (74, "150"),
            (75, "175"),
            (99, "175"),
        ],
    )
    def test_age_bands(self, age: int | None, expected: str) -> None:
        assert self.schedule.for_age(age) == Decimal(expected)


class TestValidation:
    def test_valid_table(self, table_data: dict) -> None:  # type: ignore[type-arg]
        table = parse_tax_table("test", table_data)
        assert len(table.brackets) == 3
        assert table.validate() is table

    @pytest.mark.parametrize(
        ("brackets", "message"),
        [
            ([], "no tax brackets"),
            (
                [{"lower": "100", "upper": None, "rate": "0.1"}],
                "first bracket must start at 0",
            ),
            (
                [
                    {"lower": "0", "upper": "1000", "rate": "0.1"},
                    {"lower": "1200", "upper": None, "rate": "0.2"},
                ],
                "gap",
            ),
            (
                [
                    {"lower": "0", "upper": "1000", "rate": "0.1"},
                    {"lower": "900", "upper": None, "rate": "0.2"},
                ],
                "overlap",
            ),
            (
                [
                    {"lower": "0", "upper": None, "rate": "0.1"},
                    {"lower": "1000", "upper": None, "rate": "0.2"},
                ],
                "not the last bracket",
            ),
            (
                [
                    {"lower": "0", "upper": "1000", "rate": "0.1"},
                    {"lower": "1000", "upper": "2000", "rate": "0.2"},
                ],
                "last bracket must be unbounded",
            ),
            (
                [
                    {"lower": "0", "upper": "0", "rate": "0.1"},
                    {"lower": "0", "upper": None, "rate": "0.2"},
                ],
                "not above lower bound",
            ),
            ([{"lower": "0", "upper": None, "rate": "1.5"}], "outside"),
            ([{"lower": "0", "upper": None, "rate": "abc"}], "not a number"),
            ([{"lower": "0", "upper": None}], "malformed"),
        ],
    )
    def test_invalid_brackets(
        self, table_data: dict, brackets: list, message: str  # type: ignore[type-arg]
    ) -> None:
        table_data["brackets"] = brackets
        with pytest.raises(ConfigurationError, match=message):
            parse_tax_table("test", table_data)

    def test_negative_rebate(self, table_data: dict) -> None:  # type: ignore[type-arg]
        table_data["rebates"] = {"primary": "-1"}
        with pytest.raises(ConfigurationError, match="primary rebate is negative"):
            parse_tax_table("test", table_data)

    def test_missing_statutory(self, table_data: dict) -> None:  # type: ignore[type-arg]
        del table_data["statutory"]
        with pytest.raises(ConfigurationError, match="malformed"):
            parse_tax_table("test", table_data)

    def test_uif_rate_out_of_range(self, table_data: dict) -> None:  # type: ignore[type-arg]
        table_data["statutory"] = {"uif_rate": "2", "uif_monthly_cap": "177.12"}
        with pytest.raises(ConfigurationError, match="uif_rate"):
            parse_tax_table("test", table_data)

    def test_boolean_value_rejected(self, table_data: dict) -> None:  # type: ignore[type-arg]
        table_data["rebates"] = {"primary": True}
        with pytest.raises(ConfigurationError, match="expected a number"):
            parse_tax_table("test", table_data)


class TestLoadFromFile:
    def test_load_custom_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.yaml"
        path.write_text(
            "tax_years:\n"
            "  '2030-31':\n"
            "    brackets:\n"
            "      - {lower: 0, upper: 5000, rate: '0.1'}\n"
            "      - {lower: 5000, upper: null, rate: '0.3'}\n"
            "    rebates: {primary: 100}\n"
            "    statutory: {uif_rate: '0.01', uif_monthly_cap: '50'}\n"
        )
        table = load_tax_table("2030-31", str(path))
        assert table.brackets[1].lower == Decimal("5000")
        assert table.rebates.secondary == 0
        assert table.statutory.sdl_rate == 0

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="cannot read tax tables"):
            load_tax_table("2025-26", str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("tax_years: [unclosed\n")
        with pytest.raises(ConfigurationError, match="cannot read tax tables"):
            load_tax_table("2025-26", str(path))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ConfigurationError, match="Available: none"):
            load_tax_table("2025-26", str(path))
