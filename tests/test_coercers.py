"""
Tests para la conversión de celdas (texto, decimal, fechas)
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from backoffice.modules.fiscal_documents.ingestion.cells import CellKind, CellValue
from backoffice.modules.fiscal_documents.ingestion.coercers import (
    DEFAULT_DATE_FORMATS,
    DateFormats,
    as_decimal,
    as_issue_date,
    as_reception_date,
    as_text,
    normalize_decimal_text,
    parse_decimal,
)


class TestAsText:
    """Tests para as_text"""

    def test_text_is_trimmed(self):
        assert as_text(CellValue.text("  Factura  ")) == "Factura"

    def test_integral_number_has_no_fraction(self):
        assert as_text(CellValue.number(900123456.0)) == "900123456"
        assert as_text(CellValue.number(42)) == "42"

    def test_fractional_number_keeps_fraction(self):
        assert as_text(CellValue.number(1234.5)) == "1234.5"

    def test_boolean(self):
        assert as_text(CellValue.boolean(True)) == "true"
        assert as_text(CellValue.boolean(False)) == "false"

    def test_formula_returns_source_not_result(self):
        cell = CellValue.from_formula("A1&B1", "FE1001")
        assert as_text(cell) == "A1&B1"

    def test_blank_and_error_are_none(self):
        assert as_text(CellValue.blank()) is None
        assert as_text(CellValue.error("#N/A")) is None

    def test_date_cell_renders_iso(self):
        assert as_text(CellValue.date(datetime(2025, 10, 30))) == "2025-10-30"
        assert as_text(CellValue.date(datetime(2025, 10, 30, 14, 30, 45))) == "2025-10-30 14:30:45"


class TestDecimalNormalization:
    """Tests para separadores regionales"""

    @pytest.mark.parametrize("raw,expected", [
        ("1.234.567,89", "1234567.89"),
        ("1234,56", "1234.56"),
        ("1234.56", "1234.56"),
        ("1.234.567.89", "1234567.89"),
        ("1 234 567,89", "1234567.89"),
        ("-2.500,00", "-2500.00"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_decimal_text(raw) == expected

    def test_parse_decimal_values(self):
        assert parse_decimal("1.234.567,89") == Decimal("1234567.89")
        assert parse_decimal("1234,56") == Decimal("1234.56")
        assert parse_decimal("1234.56") == Decimal("1234.56")

    def test_parse_decimal_rejects_garbage(self):
        assert parse_decimal("") is None
        assert parse_decimal("   ") is None
        assert parse_decimal("N/A") is None
        assert parse_decimal("$ 1.000") is None
        assert parse_decimal("1,234,567") is None

    def test_parse_decimal_rejects_non_finite_and_underscores(self):
        assert parse_decimal("NaN") is None
        assert parse_decimal("Infinity") is None
        assert parse_decimal("1_000") is None


class TestAsDecimal:
    """Tests para as_decimal"""

    def test_text_cells(self):
        assert as_decimal(CellValue.text("1.234.567,89")) == Decimal("1234567.89")
        assert as_decimal(CellValue.text("1234,56")) == Decimal("1234.56")
        assert as_decimal(CellValue.text("1234.56")) == Decimal("1234.56")

    def test_empty_text_is_absent_not_zero(self):
        assert as_decimal(CellValue.text("")) is None
        assert as_decimal(CellValue.text("0")) == Decimal("0")

    def test_numeric_cell(self):
        assert as_decimal(CellValue.number(15000.5)) == Decimal("15000.5")
        assert as_decimal(CellValue.number(0)) == Decimal("0")

    def test_formula_with_numeric_result(self):
        assert as_decimal(CellValue.from_formula("40+2", 42)) == Decimal("42")
        assert as_decimal(CellValue.from_formula("SUM(N2:O2)", 1234.5)) == Decimal("1234.5")

    def test_formula_with_non_numeric_result_is_absent(self):
        assert as_decimal(CellValue.from_formula("A1", "texto")) is None
        assert as_decimal(CellValue.from_formula("A1=B1", True)) is None
        assert as_decimal(CellValue.from_formula("1/0", "#DIV/0!")) is None
        assert as_decimal(CellValue.from_formula("A1")) is None

    def test_boolean_blank_and_error_are_absent(self):
        assert as_decimal(CellValue.boolean(True)) is None
        assert as_decimal(CellValue.blank()) is None
        assert as_decimal(CellValue.error("#VALUE!")) is None

    def test_date_cell_uses_serial_number(self):
        assert as_decimal(CellValue.date(datetime(2025, 10, 30))) == Decimal("45960")


class TestIssueDate:
    """Tests para Fecha Emisión"""

    def test_primary_format(self):
        assert as_issue_date(CellValue.text("30-10-2025")) == date(2025, 10, 30)

    @pytest.mark.parametrize("raw", ["2025-10-30", "30/10/2025", "2025/10/30"])
    def test_fallback_formats(self, raw):
        assert as_issue_date(CellValue.text(raw)) == date(2025, 10, 30)

    def test_day_first_wins_over_month_first(self):
        # 05/10/2025 matches dd/MM/yyyy before MM/dd/yyyy
        assert as_issue_date(CellValue.text("05/10/2025")) == date(2025, 10, 5)

    def test_month_first_when_day_first_is_impossible(self):
        assert as_issue_date(CellValue.text("10/30/2025")) == date(2025, 10, 30)

    def test_unparseable_is_absent(self):
        assert as_issue_date(CellValue.text("not-a-date")) is None
        assert as_issue_date(CellValue.text("")) is None

    def test_native_date_cell(self):
        assert as_issue_date(CellValue.date(datetime(2025, 10, 30, 8, 0))) == date(2025, 10, 30)

    def test_plain_number_is_excel_serial(self):
        assert as_issue_date(CellValue.number(45960)) == date(2025, 10, 30)

    def test_other_kinds_are_absent(self):
        assert as_issue_date(CellValue.boolean(True)) is None
        assert as_issue_date(CellValue.from_formula("TODAY()", 45960)) is None
        assert as_issue_date(CellValue.blank()) is None

    def test_custom_format_order(self):
        formats = DateFormats(issue_format="%m/%d/%Y", fallback_formats=())
        assert as_issue_date(CellValue.text("05/10/2025"), formats) == date(2025, 5, 10)
        assert as_issue_date(CellValue.text("30-10-2025"), formats) is None

    def test_wrong_python_type_is_not_swallowed(self):
        corrupted = CellValue(CellKind.DATE, "30-10-2025")
        with pytest.raises(AttributeError):
            as_issue_date(corrupted)


class TestReceptionDate:
    """Tests para Fecha Recepción"""

    def test_timestamp_discards_time(self):
        assert as_reception_date(CellValue.text("30-10-2025 14:30:45")) == date(2025, 10, 30)

    def test_bare_date(self):
        assert as_reception_date(CellValue.text("30-10-2025")) == date(2025, 10, 30)

    def test_fallback_chain(self):
        assert as_reception_date(CellValue.text("2025-10-30")) == date(2025, 10, 30)

    def test_unparseable_is_absent(self):
        assert as_reception_date(CellValue.text("30-10-2025T14:30")) is None

    def test_native_date_cell(self):
        value = datetime(2025, 10, 30, 14, 30, 45)
        assert as_reception_date(CellValue.date(value), DEFAULT_DATE_FORMATS) == date(2025, 10, 30)


class TestDateFormatsFromSettings:
    def test_reads_settings(self):
        class FakeSettings:
            ISSUE_DATE_FORMAT = "%Y%m%d"
            RECEPTION_DATE_FORMAT = "%Y%m%d %H%M"
            FALLBACK_DATE_FORMATS = ["%d.%m.%Y"]

        formats = DateFormats.from_settings(FakeSettings)
        assert formats.issue_chain == ("%Y%m%d", "%d.%m.%Y")
        assert formats.reception_chain == ("%Y%m%d %H%M", "%Y%m%d", "%d.%m.%Y")


class TestDateFieldWidth:
    """Día y mes deben venir con dos dígitos"""

    @pytest.mark.parametrize("raw", ["1-2-2025", "30-1-2025", "5/10/2025", "2025-1-30"])
    def test_single_digit_fields_are_rejected(self, raw):
        assert as_issue_date(CellValue.text(raw)) is None

    def test_single_digit_time_is_rejected(self):
        assert as_reception_date(CellValue.text("30-10-2025 9:05:00")) is None

    def test_two_digit_fields_still_parse(self):
        assert as_issue_date(CellValue.text("01-02-2025")) == date(2025, 2, 1)
        assert as_reception_date(CellValue.text("01-02-2025 09:05:00")) == date(2025, 2, 1)
