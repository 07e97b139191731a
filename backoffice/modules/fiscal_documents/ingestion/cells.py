"""
Tagged representation of a spreadsheet cell.

Workbook readers decide the kind of each cell once; coercers only look at
``CellValue.kind`` and never at library-specific type tags.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CellKind(str, Enum):
    BLANK = "blank"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"          # numeric cell with a date number format
    BOOLEAN = "boolean"
    FORMULA = "formula"    # value holds the evaluated result, formula the source
    ERROR = "error"        # e.g. #DIV/0!


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Any = None
    formula: Optional[str] = None

    @classmethod
    def blank(cls) -> "CellValue":
        return BLANK_CELL

    @classmethod
    def text(cls, value: str) -> "CellValue":
        return cls(CellKind.TEXT, value)

    @classmethod
    def number(cls, value) -> "CellValue":
        return cls(CellKind.NUMBER, float(value))

    @classmethod
    def date(cls, value: datetime) -> "CellValue":
        return cls(CellKind.DATE, value)

    @classmethod
    def boolean(cls, value) -> "CellValue":
        return cls(CellKind.BOOLEAN, bool(value))

    @classmethod
    def from_formula(cls, source: str, result: Any = None) -> "CellValue":
        return cls(CellKind.FORMULA, result, source)

    @classmethod
    def error(cls, code: Any = None) -> "CellValue":
        return cls(CellKind.ERROR, code)

    @property
    def is_blank(self) -> bool:
        if self.kind is CellKind.BLANK:
            return True
        return self.kind is CellKind.TEXT and not str(self.value).strip()


BLANK_CELL = CellValue(CellKind.BLANK)
