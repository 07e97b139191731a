"""
Lectura de la primera hoja de un libro Excel como filas de ``CellValue``.

- ``.xlsx`` con openpyxl en modo solo lectura. El libro se abre dos veces:
  una para el código de las fórmulas y otra para sus resultados guardados.
  Si una fórmula no tiene resultado guardado se calcula con pycel.
- ``.xls`` con xlrd. xlrd solo expone el resultado de las fórmulas, así que
  en este formato una fórmula se ve como su valor.

El formato se decide únicamente por la extensión del nombre del archivo.
"""
import io
import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from enum import Enum
from itertools import zip_longest
from typing import Iterator, List, Optional, Tuple

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.datetime import to_excel
from xlrd.xldate import XLDateError, xldate_as_datetime

from backoffice.modules.fiscal_documents.ingestion.cells import CellValue, BLANK_CELL
from backoffice.modules.fiscal_documents.ingestion.evaluator import FormulaEvaluator
from backoffice.modules.fiscal_documents.ingestion.exceptions import UnsupportedFileFormatError

logger = logging.getLogger(__name__)

SheetRow = Tuple[int, List[CellValue]]


class WorkbookFormat(str, Enum):
    XLSX = "xlsx"  # Office Open XML (zip)
    XLS = "xls"    # BIFF8 binary


def detect_format(filename: Optional[str]) -> WorkbookFormat:
    name = (filename or "").strip().lower()
    if name.endswith(".xlsx"):
        return WorkbookFormat.XLSX
    if name.endswith(".xls"):
        return WorkbookFormat.XLS
    raise UnsupportedFileFormatError(filename)


def xlsx_cell_value(source, cached=None, evaluator: Optional[FormulaEvaluator] = None) -> CellValue:
    """
    Build a CellValue from an openpyxl cell read with data_only=False (source)
    and the same cell read with data_only=True (cached formula result).
    Formulas without a cached result are computed by the evaluator, if given.
    """
    value = getattr(source, "value", None)
    if value is None:
        return BLANK_CELL

    data_type = getattr(source, "data_type", None)
    if data_type == "f":
        formula = str(getattr(value, "text", value))  # ArrayFormula keeps its source in .text
        if formula.startswith("="):
            formula = formula[1:]
        result = getattr(cached, "value", None)
        if result is None and evaluator is not None:
            result = evaluator.evaluate(source.coordinate)
        return CellValue.from_formula(formula, result)
    if data_type == "e":
        return CellValue.error(value)

    if isinstance(value, bool):
        return CellValue.boolean(value)
    if isinstance(value, datetime):
        return CellValue.date(value)
    if isinstance(value, date):
        return CellValue.date(datetime.combine(value, time.min))
    if isinstance(value, (time, timedelta)):
        return CellValue.number(to_excel(value))
    if isinstance(value, (int, float)):
        return CellValue.number(value)
    return CellValue.text(str(value))


def xls_cell_value(cell, datemode: int) -> CellValue:
    """Build a CellValue from an xlrd cell."""
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return BLANK_CELL
    if ctype == xlrd.XL_CELL_TEXT:
        return CellValue.text(cell.value)
    if ctype == xlrd.XL_CELL_NUMBER:
        return CellValue.number(cell.value)
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return CellValue.date(xldate_as_datetime(cell.value, datemode))
        except (XLDateError, ValueError, OverflowError) as e:
            logger.debug(f"Date cell {cell.value} kept as number: {e}")
            return CellValue.number(cell.value)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return CellValue.boolean(cell.value)
    if ctype == xlrd.XL_CELL_ERROR:
        return CellValue.error(xlrd.error_text_from_code.get(cell.value, cell.value))
    return BLANK_CELL


@contextmanager
def _xlsx_rows(content: bytes) -> Iterator[Iterator[SheetRow]]:
    formulas_wb = load_workbook(io.BytesIO(content), read_only=True, data_only=False)
    try:
        values_wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception:
        formulas_wb.close()
        raise

    try:
        formulas_ws = formulas_wb.worksheets[0]
        values_ws = values_wb.worksheets[0]
        evaluator = FormulaEvaluator(content, formulas_ws.title)
        logger.debug(f"Reading sheet '{formulas_ws.title}' of {len(formulas_wb.worksheets)}")

        def rows() -> Iterator[SheetRow]:
            pairs = zip_longest(formulas_ws.iter_rows(), values_ws.iter_rows(), fillvalue=())
            for index, (source_row, cached_row) in enumerate(pairs):
                yield index, [
                    xlsx_cell_value(source, cached, evaluator)
                    for source, cached in zip_longest(source_row, cached_row)
                ]

        yield rows()
    finally:
        formulas_wb.close()
        values_wb.close()


@contextmanager
def _xls_rows(content: bytes) -> Iterator[Iterator[SheetRow]]:
    book = xlrd.open_workbook(file_contents=content, on_demand=True)
    try:
        if book.nsheets == 0:
            yield iter(())
            return
        sheet = book.sheet_by_index(0)
        logger.debug(f"Reading sheet '{sheet.name}' of {book.nsheets}")

        def rows() -> Iterator[SheetRow]:
            for index in range(sheet.nrows):
                yield index, [xls_cell_value(cell, book.datemode) for cell in sheet.row(index)]

        yield rows()
    finally:
        book.release_resources()


@contextmanager
def open_first_sheet(content: bytes, workbook_format: WorkbookFormat) -> Iterator[Iterator[SheetRow]]:
    """Itera (índice de fila, celdas) sobre la primera hoja; las demás se ignoran."""
    opener = _xlsx_rows if workbook_format is WorkbookFormat.XLSX else _xls_rows
    with opener(content) as rows:
        yield rows
