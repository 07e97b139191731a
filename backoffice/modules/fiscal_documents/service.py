from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import BinaryIO, List, Optional
import logging

from backoffice.core.config import settings
from backoffice.modules.fiscal_documents.models import FiscalDocument
from backoffice.modules.fiscal_documents.schemas import FiscalDocumentCreate
from backoffice.modules.fiscal_documents.ingestion import (
    DateFormats,
    FileTooLargeError,
    FiscalDocumentImportError,
    SpreadsheetIngestionEngine,
)

logger = logging.getLogger(__name__)


class FiscalDocumentService:
    def __init__(self, db: Session):
        self.db = db

    def import_spreadsheet(self, stream: BinaryIO, filename: Optional[str], size: Optional[int] = None) -> List[FiscalDocument]:
        """
        Importar un reporte Excel de documentos fiscales.

        Los errores del archivo (formato, tamaño, encabezado) responden 400; los
        errores de guardado o inesperados responden 500 y no se guarda nada.
        """
        engine = SpreadsheetIngestionEngine(
            self.save_all,
            formats=DateFormats.from_settings(settings)
        )
        try:
            if size is not None and size > settings.MAX_UPLOAD_SIZE:
                stream.close()
                raise FileTooLargeError(size, settings.MAX_UPLOAD_SIZE)

            result = engine.ingest(stream, filename)

        except FiscalDocumentImportError as e:
            logger.info(f"Importación rechazada para '{filename}': {type(e).__name__}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error guardando documentos fiscales de '{filename}': {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al guardar los documentos: {str(e)}"
            )
        except Exception as e:
            logger.exception(f"Error inesperado procesando '{filename}'")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al procesar el archivo: {str(e)}"
            )

        if result.skipped:
            logger.warning(
                f"'{filename}': {result.skipped} fila(s) descartadas, "
                f"{len(result.documents)} documento(s) guardados"
            )
        return result.documents

    def save_all(self, documents: List[FiscalDocumentCreate]) -> List[FiscalDocument]:
        """Guardar el lote completo en una sola transacción (todo o nada)."""
        entities = [FiscalDocument(**document.model_dump()) for document in documents]
        if not entities:
            return entities

        try:
            self.db.add_all(entities)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        for entity in entities:
            self.db.refresh(entity)
        return entities

    def get_all_documents(self, limit: int = 100, offset: int = 0) -> List[FiscalDocument]:
        """Listar documentos fiscales importados, en orden de importación"""
        try:
            return (
                self.db.query(FiscalDocument)
                .order_by(FiscalDocument.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al obtener documentos fiscales: {str(e)}"
            )

    def get_document_by_id(self, document_id: int) -> FiscalDocument:
        """Obtener un documento fiscal específico"""
        document = self.db.get(FiscalDocument, document_id)
        if not document:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Documento fiscal no encontrado"
            )
        return document
