"""
Cálculo de fórmulas para libros .xlsx sin resultados guardados.

Excel guarda junto a cada fórmula su último resultado, pero los libros
generados por programas (openpyxl, pandas, exportadores contables) normalmente
no lo hacen. Para esas celdas la fórmula se calcula con pycel.
"""
import logging
import os
import tempfile
from typing import Any, Optional

from openpyxl.utils import quote_sheetname
from pycel import ExcelCompiler

logger = logging.getLogger(__name__)


class FormulaEvaluator:
    """
    Calcula celdas de fórmula de una hoja.

    El libro se compila una sola vez y solo cuando alguna celda lo necesita;
    los libros guardados por Excel nunca llegan a compilarse.
    """

    def __init__(self, content: bytes, sheet_title: str):
        self.content = content
        self.sheet_title = sheet_title
        self._compiler: Optional[ExcelCompiler] = None
        self._unavailable = False

    def _load(self) -> Optional[ExcelCompiler]:
        if self._compiler is not None or self._unavailable:
            return self._compiler

        # pycel opens workbooks by path
        handle, path = tempfile.mkstemp(suffix=".xlsx")
        try:
            with os.fdopen(handle, "wb") as tmp:
                tmp.write(self.content)
            self._compiler = ExcelCompiler(filename=path)
        except Exception as e:
            logger.warning(f"No se pudo preparar el cálculo de fórmulas de '{self.sheet_title}': {e}")
            self._unavailable = True
        finally:
            os.unlink(path)
        return self._compiler

    def evaluate(self, coordinate: str) -> Any:
        """Resultado de la fórmula en ``coordinate`` (p. ej. "AD2"); None si no se puede calcular."""
        compiler = self._load()
        if compiler is None:
            return None

        address = f"{quote_sheetname(self.sheet_title)}!{coordinate}"
        try:
            return compiler.evaluate(address)
        except Exception as e:
            logger.warning(f"No se pudo calcular la fórmula en {address}: {e}")
            return None
