"""
Validación del encabezado del reporte de documentos fiscales.

La primera fila debe traer exactamente las 32 columnas esperadas, en orden.
La comparación ignora mayúsculas/minúsculas. No hay aceptación parcial.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from backoffice.modules.fiscal_documents.ingestion.cells import CellValue, BLANK_CELL
from backoffice.modules.fiscal_documents.ingestion.coercers import as_text
from backoffice.modules.fiscal_documents.ingestion.exceptions import HeaderValidationError

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = (
    "Tipo de Documento",
    "CUFE/CUDE",
    "Folio",
    "Prefijo",
    "Divisa",
    "Forma de Pago",
    "Medio de Pago",
    "Fecha Emisión",
    "Fecha Recepción",
    "NIT Emisor",
    "Nombre Emisor",
    "NIT Receptor",
    "Nombre Receptor",
    "IVA",
    "ICA",
    "IC",
    "INC",
    "Timbre",
    "INC Bolsas",
    "IN Carbono",
    "IN Combustibles",
    "IC Datos",
    "ICL",
    "INPP",
    "IBUA",
    "ICUI",
    "Rete IVA",
    "Rete Renta",
    "Rete ICA",
    "Total",
    "Estado",
    "Grupo",
)

NO_HEADER_MESSAGE = "El archivo Excel no contiene encabezados en la primera fila"


class ColumnStatus(str, Enum):
    OK = "ok"
    MISSING = "missing"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class ColumnCheck:
    position: int  # 1-based
    expected: str
    actual: str
    status: ColumnStatus

    def describe(self) -> str:
        if self.status is ColumnStatus.MISSING:
            return f"Columna {self.position}: '{self.expected}'"
        return (
            f"Columna {self.position}: Se esperaba '{self.expected}' "
            f"pero se encontró '{self.actual}'"
        )


def check_header(cells: Sequence[CellValue], expected: Sequence[str] = EXPECTED_COLUMNS) -> List[ColumnCheck]:
    """Clasifica cada posición esperada como OK, MISSING o MISMATCH."""
    checks = []
    for index, expected_name in enumerate(expected):
        cell = cells[index] if index < len(cells) else BLANK_CELL
        actual = (as_text(cell) or "").strip()
        if not actual:
            status = ColumnStatus.MISSING
        elif actual.casefold() != expected_name.casefold():
            status = ColumnStatus.MISMATCH
        else:
            status = ColumnStatus.OK
        checks.append(ColumnCheck(index + 1, expected_name, actual, status))
    return checks


def build_header_error_message(
    missing: Sequence[ColumnCheck],
    mismatched: Sequence[ColumnCheck],
    expected: Sequence[str] = EXPECTED_COLUMNS,
) -> str:
    lines = ["El archivo Excel no tiene la estructura correcta. Errores encontrados:", ""]

    if mismatched:
        lines.append("Columnas con nombres incorrectos:")
        lines.extend(f"  - {check.describe()}" for check in mismatched)
        lines.append("")

    if missing:
        lines.append("Columnas faltantes o vacías:")
        lines.extend(f"  - {check.describe()}" for check in missing)
        lines.append("")

    lines.append("Columnas esperadas en orden:")
    lines.extend(f"  {position}. {name}" for position, name in enumerate(expected, start=1))
    return "\n".join(lines) + "\n"


def validate_header(cells: Optional[Sequence[CellValue]], expected: Sequence[str] = EXPECTED_COLUMNS) -> None:
    """Lanza HeaderValidationError con el diagnóstico completo si el encabezado no cumple."""
    if cells is None:
        raise HeaderValidationError(NO_HEADER_MESSAGE)

    checks = check_header(cells, expected)
    missing = [check for check in checks if check.status is ColumnStatus.MISSING]
    mismatched = [check for check in checks if check.status is ColumnStatus.MISMATCH]
    if not missing and not mismatched:
        return

    logger.warning(
        f"Encabezado inválido: {len(missing)} columna(s) faltante(s), "
        f"{len(mismatched)} con nombre incorrecto"
    )
    raise HeaderValidationError(
        build_header_error_message(missing, mismatched, expected),
        missing=missing,
        mismatched=mismatched,
    )
