"""
Errors raised by the spreadsheet ingestion engine.

All of them abort the whole import; row-level problems never surface here.
"""


class FiscalDocumentImportError(ValueError):
    """Base class for import failures caused by the uploaded file itself"""


class UnsupportedFileFormatError(FiscalDocumentImportError):
    def __init__(self, filename=None):
        self.filename = filename
        super().__init__("El archivo debe ser un Excel (.xlsx o .xls)")


class EmptyFileError(FiscalDocumentImportError):
    def __init__(self):
        super().__init__("El archivo está vacío")


class FileTooLargeError(FiscalDocumentImportError):
    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"El archivo excede el tamaño máximo permitido de {max_size // (1024 * 1024)}MB. "
            f"Tamaño actual: {size / (1024.0 * 1024.0):.2f} MB"
        )


class HeaderValidationError(FiscalDocumentImportError):
    """The first row does not match the expected column contract"""

    def __init__(self, message: str, missing=(), mismatched=()):
        self.missing = list(missing)
        self.mismatched = list(mismatched)
        super().__init__(message)
