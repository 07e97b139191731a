from backoffice.modules.fiscal_documents.ingestion.cells import CellKind, CellValue
from backoffice.modules.fiscal_documents.ingestion.coercers import (
    DateFormats,
    DEFAULT_DATE_FORMATS,
    as_decimal,
    as_issue_date,
    as_reception_date,
    as_text,
)
from backoffice.modules.fiscal_documents.ingestion.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    FiscalDocumentImportError,
    HeaderValidationError,
    UnsupportedFileFormatError,
)
from backoffice.modules.fiscal_documents.ingestion.header import EXPECTED_COLUMNS, validate_header
from backoffice.modules.fiscal_documents.ingestion.mapper import MappedRow, RowFailure, RowMapper
from backoffice.modules.fiscal_documents.ingestion.pipeline import IngestionResult, SpreadsheetIngestionEngine
from backoffice.modules.fiscal_documents.ingestion.workbook import WorkbookFormat, detect_format, open_first_sheet
