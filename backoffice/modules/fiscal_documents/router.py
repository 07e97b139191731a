from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from typing import List
import logging
import os

from backoffice.core.config import settings
from backoffice.dependencies.dbDependecies import db_dependency
from backoffice.modules.auth.dependencies import AuthDependencies
from backoffice.modules.auth.schemas import AuthContext
from backoffice.modules.fiscal_documents.ingestion import UnsupportedFileFormatError, detect_format
from backoffice.modules.fiscal_documents.service import FiscalDocumentService
from backoffice.modules.fiscal_documents.schemas import FiscalDocumentOut

logger = logging.getLogger(__name__)

fiscal_documents_router = APIRouter(prefix="/fiscal-documents", tags=["Fiscal Documents"])


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


@fiscal_documents_router.post("/upload", response_model=List[FiscalDocumentOut])
def upload_fiscal_documents(
    db: db_dependency,
    file: UploadFile = File(..., description="Reporte de documentos fiscales (.xlsx o .xls)"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """
    Importar documentos fiscales desde un archivo Excel

    El archivo debe tener en la primera hoja las 32 columnas del reporte DIAN
    en orden (Tipo de Documento, CUFE/CUDE, Folio, ..., Estado, Grupo).

    Validaciones previas:
    - Extensión .xlsx o .xls
    - Archivo no vacío y de máximo 512MB

    Retorna los documentos guardados. Las filas que no se pudieron convertir
    se omiten; si el encabezado no coincide no se guarda nada.
    """
    filename = file.filename or ""
    size = _upload_size(file)

    if size == 0:
        file.file.close()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo está vacío"
        )

    try:
        detect_format(filename)
    except UnsupportedFileFormatError as e:
        file.file.close()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Usuario '{auth_context.username}' importa '{filename}' ({size} bytes)")
    service = FiscalDocumentService(db)
    return service.import_spreadsheet(file.file, filename, size=size)


@fiscal_documents_router.get("/", response_model=List[FiscalDocumentOut])
def list_fiscal_documents(
    db: db_dependency,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """Listar los documentos fiscales importados"""
    service = FiscalDocumentService(db)
    return service.get_all_documents(limit, offset)


@fiscal_documents_router.get("/{document_id}", response_model=FiscalDocumentOut)
def get_fiscal_document(
    document_id: int,
    db: db_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """Obtener un documento fiscal por su identificador"""
    service = FiscalDocumentService(db)
    return service.get_document_by_id(document_id)
