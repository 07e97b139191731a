"""
Orquestador de la importación de documentos fiscales desde Excel.

Flujo: formato por extensión -> primera hoja -> validación del encabezado ->
conversión de filas (las fallidas se descartan) -> guardado masivo.
"""
import logging
from contextlib import closing
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, List, Sequence

from backoffice.modules.fiscal_documents.ingestion.coercers import DateFormats, DEFAULT_DATE_FORMATS
from backoffice.modules.fiscal_documents.ingestion.exceptions import EmptyFileError
from backoffice.modules.fiscal_documents.ingestion.header import validate_header
from backoffice.modules.fiscal_documents.ingestion.mapper import MappedRow, RowFailure, RowMapper
from backoffice.modules.fiscal_documents.ingestion.workbook import detect_format, open_first_sheet
from backoffice.modules.fiscal_documents.schemas import FiscalDocumentCreate

logger = logging.getLogger(__name__)

# Receives every accepted row in one call and returns the persisted records
SaveAll = Callable[[List[FiscalDocumentCreate]], Sequence]


@dataclass
class IngestionResult:
    documents: list
    failures: List[RowFailure] = field(default_factory=list)
    rows_read: int = 0

    @property
    def skipped(self) -> int:
        return len(self.failures)


class SpreadsheetIngestionEngine:
    """Convierte un archivo Excel en documentos fiscales persistidos."""

    def __init__(self, save_all: SaveAll, formats: DateFormats = DEFAULT_DATE_FORMATS, open_sheet=open_first_sheet):
        self.save_all = save_all
        self.mapper = RowMapper(formats)
        self.open_sheet = open_sheet

    def ingest(self, stream: BinaryIO, filename: str) -> IngestionResult:
        """
        Procesa el archivo completo.

        Raises:
            UnsupportedFileFormatError: extensión distinta de .xlsx/.xls.
            EmptyFileError: el archivo no tiene contenido.
            HeaderValidationError: la primera fila no cumple el contrato de columnas.
            Exception: cualquier error del guardado se propaga sin modificar.
        """
        with closing(stream):
            workbook_format = detect_format(filename)
            content = stream.read()
            if not content:
                raise EmptyFileError()

            accepted: List[FiscalDocumentCreate] = []
            failures: List[RowFailure] = []
            rows_read = 0

            with self.open_sheet(content, workbook_format) as rows:
                first = next(rows, None)
                validate_header(first[1] if first is not None else None)

                for row_index, cells in rows:
                    if all(cell.is_blank for cell in cells):
                        continue
                    rows_read += 1
                    result = self.mapper.map_row(row_index, cells)
                    if isinstance(result, MappedRow):
                        accepted.append(result.document)
                    else:
                        failures.append(result)

        logger.info(
            f"Archivo '{filename}': {rows_read} fila(s) leídas, {len(accepted)} aceptadas, "
            f"{len(failures)} descartadas"
        )

        documents = list(self.save_all(accepted))
        return IngestionResult(documents=documents, failures=failures, rows_read=rows_read)
