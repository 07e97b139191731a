"""
Conversión de celdas a texto, decimal y fecha.

Los reportes llegan de sistemas contables distintos, así que cada conversión
tolera varios formatos regionales. Un valor que no se puede interpretar se
registra en el log y se devuelve como ``None`` (dato ausente, no cero).
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

from openpyxl.utils.datetime import from_excel, to_excel

from backoffice.modules.fiscal_documents.ingestion.cells import CellKind, CellValue

logger = logging.getLogger(__name__)

_PLAIN_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_DOT_BETWEEN_DIGITS = re.compile(r"\d\.\d")


@dataclass(frozen=True)
class DateFormats:
    """Patrones strptime para las columnas de fecha, en orden de prioridad"""
    issue_format: str = "%d-%m-%Y"
    reception_format: str = "%d-%m-%Y %H:%M:%S"
    fallback_formats: Tuple[str, ...] = ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%Y/%m/%d")

    @classmethod
    def from_settings(cls, settings) -> "DateFormats":
        return cls(
            issue_format=settings.ISSUE_DATE_FORMAT,
            reception_format=settings.RECEPTION_DATE_FORMAT,
            fallback_formats=tuple(settings.FALLBACK_DATE_FORMATS),
        )

    @property
    def issue_chain(self) -> Tuple[str, ...]:
        return (self.issue_format, *self.fallback_formats)

    @property
    def reception_chain(self) -> Tuple[str, ...]:
        return (self.reception_format, *self.issue_chain)


DEFAULT_DATE_FORMATS = DateFormats()


def as_text(cell: CellValue) -> Optional[str]:
    """
    Texto de la celda; las fórmulas devuelven su código fuente, no el resultado.

    En libros .xls (xlrd) las fórmulas llegan solo como su valor, así que ahí
    se obtiene el resultado y no el código.
    """
    kind = cell.kind
    if kind is CellKind.TEXT:
        return cell.value.strip()
    if kind is CellKind.NUMBER:
        value = cell.value
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if kind is CellKind.BOOLEAN:
        return "true" if cell.value else "false"
    if kind is CellKind.FORMULA:
        return cell.formula
    if kind is CellKind.DATE:
        value = cell.value
        if value.time() == time.min:
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    return None


def normalize_decimal_text(raw: str) -> str:
    """
    Normaliza separadores de miles/decimales a notación con punto decimal.

    - "1.234.567,89" -> "1234567.89" (punto de miles, coma decimal)
    - "1234,56"      -> "1234.56"
    - "1.234.567.89" -> "1234567.89" (solo el último punto es decimal)
    """
    text = raw.replace(" ", "")
    if "." in text and "," in text:
        return text.replace(".", "").replace(",", ".")
    if "," in text:
        return text.replace(",", ".")
    if _DOT_BETWEEN_DIGITS.search(text) and text.count(".") > 1:
        last_dot = text.rindex(".")
        return text[:last_dot].replace(".", "") + text[last_dot:]
    return text


def parse_decimal(raw: str) -> Optional[Decimal]:
    """Interpreta un texto numérico con convenciones regionales; None si no es válido."""
    text = raw.strip()
    if not text:
        return None
    normalized = normalize_decimal_text(text)
    if not _PLAIN_DECIMAL.match(normalized):
        logger.warning(f"Error parseando decimal: '{raw}'")
        return None
    try:
        return Decimal(normalized)
    except InvalidOperation:
        logger.warning(f"Error parseando decimal: '{raw}'")
        return None


def _number_to_decimal(value) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (datetime, date, time, timedelta)):
        value = to_excel(value)
    if isinstance(value, (int, float)):
        result = Decimal(str(value))
        return result if result.is_finite() else None
    return None


def as_decimal(cell: CellValue) -> Optional[Decimal]:
    kind = cell.kind
    if kind is CellKind.NUMBER:
        return _number_to_decimal(cell.value)
    if kind is CellKind.TEXT:
        return parse_decimal(cell.value)
    if kind is CellKind.FORMULA:
        # Only numeric results count; text/boolean/error results are absent
        return _number_to_decimal(cell.value)
    if kind is CellKind.DATE:
        return _number_to_decimal(cell.value)
    return None


def parse_date(text: str, patterns: Iterable[str]) -> Optional[date]:
    """
    Prueba los patrones en orden y devuelve la primera fecha válida.

    Día, mes, hora, minuto y segundo deben venir con dos dígitos: "1-2-2025" no
    coincide con %d-%m-%Y.
    """
    for pattern in patterns:
        try:
            parsed = datetime.strptime(text, pattern)
        except ValueError:
            continue
        # strptime accepts single-digit fields; the formatted value must round-trip
        if parsed.strftime(pattern) == text:
            return parsed.date()
    return None


def serial_to_date(serial: float) -> Optional[date]:
    """Número de serie de Excel (sistema 1900) a fecha."""
    try:
        converted = from_excel(serial)
    except (ValueError, OverflowError) as e:
        logger.warning(f"Número de serie de fecha fuera de rango: {serial} ({e})")
        return None
    if not isinstance(converted, datetime):
        # Fractions of a day are times, not dates
        return None
    return converted.date()


def _as_date(cell: CellValue, patterns: Tuple[str, ...], label: str) -> Optional[date]:
    kind = cell.kind
    if kind is CellKind.TEXT:
        text = cell.value.strip()
        if not text:
            return None
        parsed = parse_date(text, patterns)
        if parsed is None:
            logger.warning(f"No se pudo parsear la {label}: {text}")
        return parsed
    if kind is CellKind.DATE:
        return cell.value.date()
    if kind is CellKind.NUMBER:
        return serial_to_date(cell.value)
    return None


def as_issue_date(cell: CellValue, formats: DateFormats = DEFAULT_DATE_FORMATS) -> Optional[date]:
    """Fecha Emisión: dd-MM-yyyy, luego los formatos alternos."""
    return _as_date(cell, formats.issue_chain, "Fecha Emisión")


def as_reception_date(cell: CellValue, formats: DateFormats = DEFAULT_DATE_FORMATS) -> Optional[date]:
    """Fecha Recepción: dd-MM-yyyy HH:mm:ss (se descarta la hora), luego los de emisión."""
    return _as_date(cell, formats.reception_chain, "Fecha Recepción")
