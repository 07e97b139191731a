"""
Conversión de una fila de datos en un documento fiscal.

Cada columna del contrato se lee por posición con el conversor que le
corresponde. Una fila que falla de forma inesperada se descarta completa y
se reporta como ``RowFailure``; nunca se persiste a medias.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union

from backoffice.modules.fiscal_documents.ingestion.cells import CellValue, BLANK_CELL
from backoffice.modules.fiscal_documents.ingestion.coercers import (
    DateFormats,
    DEFAULT_DATE_FORMATS,
    as_decimal,
    as_issue_date,
    as_reception_date,
    as_text,
)
from backoffice.modules.fiscal_documents.schemas import FiscalDocumentCreate

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    TEXT = "text"
    DECIMAL = "decimal"
    ISSUE_DATE = "issue_date"
    RECEPTION_DATE = "reception_date"


# Column order matches header.EXPECTED_COLUMNS
COLUMN_FIELDS: Tuple[Tuple[str, FieldKind], ...] = (
    ("document_type", FieldKind.TEXT),
    ("cufe_cude", FieldKind.TEXT),
    ("folio", FieldKind.TEXT),
    ("prefix", FieldKind.TEXT),
    ("currency", FieldKind.TEXT),
    ("payment_form", FieldKind.TEXT),
    ("payment_method", FieldKind.TEXT),
    ("issue_date", FieldKind.ISSUE_DATE),
    ("reception_date", FieldKind.RECEPTION_DATE),
    ("issuer_nit", FieldKind.TEXT),
    ("issuer_name", FieldKind.TEXT),
    ("receiver_nit", FieldKind.TEXT),
    ("receiver_name", FieldKind.TEXT),
    ("iva", FieldKind.DECIMAL),
    ("ica", FieldKind.DECIMAL),
    ("ic", FieldKind.DECIMAL),
    ("inc", FieldKind.DECIMAL),
    ("timbre", FieldKind.DECIMAL),
    ("inc_bags", FieldKind.DECIMAL),
    ("in_carbon", FieldKind.DECIMAL),
    ("in_fuels", FieldKind.DECIMAL),
    ("ic_data", FieldKind.DECIMAL),
    ("icl", FieldKind.DECIMAL),
    ("inpp", FieldKind.DECIMAL),
    ("ibua", FieldKind.DECIMAL),
    ("icui", FieldKind.DECIMAL),
    ("rete_iva", FieldKind.DECIMAL),
    ("rete_rent", FieldKind.DECIMAL),
    ("rete_ica", FieldKind.DECIMAL),
    ("total", FieldKind.DECIMAL),
    ("status", FieldKind.TEXT),
    ("group_info", FieldKind.TEXT),
)


@dataclass(frozen=True)
class MappedRow:
    row_index: int
    document: FiscalDocumentCreate


@dataclass(frozen=True)
class RowFailure:
    row_index: int  # 0-based, header is row 0
    reason: str

    @property
    def row_number(self) -> int:
        """Número de fila tal como lo muestra Excel"""
        return self.row_index + 1


RowResult = Union[MappedRow, RowFailure]


class RowMapper:
    def __init__(self, formats: DateFormats = DEFAULT_DATE_FORMATS):
        self.formats = formats

    def coerce(self, kind: FieldKind, cell: CellValue):
        if kind is FieldKind.TEXT:
            return as_text(cell)
        if kind is FieldKind.DECIMAL:
            return as_decimal(cell)
        if kind is FieldKind.ISSUE_DATE:
            return as_issue_date(cell, self.formats)
        return as_reception_date(cell, self.formats)

    def map_row(self, row_index: int, cells: Sequence[CellValue]) -> RowResult:
        try:
            values = {}
            for column, (field, kind) in enumerate(COLUMN_FIELDS):
                cell = cells[column] if column < len(cells) else BLANK_CELL
                values[field] = self.coerce(kind, cell)
            return MappedRow(row_index, FiscalDocumentCreate(**values))
        except Exception as e:
            logger.warning(f"Error procesando fila {row_index + 1}: {e}")
            return RowFailure(row_index, f"{type(e).__name__}: {e}")
