"""
Fixtures compartidos: base de datos SQLite en memoria, cliente HTTP,
tokens JWT y construcción de libros Excel en memoria.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import io
from datetime import datetime
from typing import Iterable, Sequence

import pytest
import xlwt
from fastapi.testclient import TestClient
from openpyxl import Workbook

from backoffice.database.database import Base, SessionLocal, sync_engine, get_db
from backoffice.main import app
from backoffice.modules.auth.utils import create_access_token
from backoffice.modules.fiscal_documents.ingestion.header import EXPECTED_COLUMNS
from backoffice.modules.fiscal_documents.models import FiscalDocument


# ===== BASE DE DATOS =====

@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.query(FiscalDocument).delete()
        session.commit()
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ===== AUTENTICACIÓN =====

@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin", "role": "ADMIN"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token({"sub": "contador", "role": "USER"})
    return {"Authorization": f"Bearer {token}"}


# ===== LIBROS EXCEL =====

def sample_row(**overrides) -> list:
    """Una fila válida de 32 columnas; overrides por nombre de columna esperada."""
    row = {
        "Tipo de Documento": "Factura electrónica",
        "CUFE/CUDE": "a1b2c3d4e5f6",
        "Folio": "1001",
        "Prefijo": "FE",
        "Divisa": "COP",
        "Forma de Pago": "Contado",
        "Medio de Pago": "Transferencia",
        "Fecha Emisión": "30-10-2025",
        "Fecha Recepción": "30-10-2025 14:30:45",
        "NIT Emisor": "900123456",
        "Nombre Emisor": "Proveedor S.A.S.",
        "NIT Receptor": "830063999",
        "Nombre Receptor": "Cliente Ltda.",
        "IVA": "1.234.567,89",
        "ICA": "1234,56",
        "IC": "1234.56",
        "INC": 0,
        "Timbre": None,
        "INC Bolsas": None,
        "IN Carbono": None,
        "IN Combustibles": None,
        "IC Datos": None,
        "ICL": None,
        "INPP": None,
        "IBUA": None,
        "ICUI": None,
        "Rete IVA": "",
        "Rete Renta": 15000.5,
        "Rete ICA": None,
        "Total": 7500000,
        "Estado": "Aprobado",
        "Grupo": "Recibido",
    }
    row.update(overrides)
    return [row[name] for name in EXPECTED_COLUMNS]


def build_xlsx(rows: Iterable[Sequence], header: Sequence = EXPECTED_COLUMNS, extra_sheets: int = 0) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Documentos"
    if header is not None:
        sheet.append(list(header))
    for row in rows:
        sheet.append(list(row))
    for index in range(extra_sheets):
        other = workbook.create_sheet(f"Otra {index + 1}")
        other.append(["no", "es", "parte", "del", "reporte"])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


XLS_DATE_STYLE = xlwt.easyxf(num_format_str="DD-MM-YYYY")


def build_xls(rows: Iterable[Sequence], header: Sequence = EXPECTED_COLUMNS, extra_sheets: int = 0) -> bytes:
    """Libro .xls (BIFF8) real; las celdas None no se escriben y las fechas llevan formato de fecha."""
    workbook = xlwt.Workbook(encoding="utf-8")
    sheet = workbook.add_sheet("Documentos")
    all_rows = ([list(header)] if header is not None else []) + [list(row) for row in rows]
    for row_index, row in enumerate(all_rows):
        for col_index, value in enumerate(row):
            if value is None:
                continue
            if isinstance(value, datetime):
                sheet.write(row_index, col_index, value, XLS_DATE_STYLE)
            else:
                sheet.write(row_index, col_index, value)
    for index in range(extra_sheets):
        other = workbook.add_sheet(f"Otra {index + 1}")
        other.write(0, 0, "no es parte del reporte")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_factory():
    return build_xlsx


@pytest.fixture
def xls_factory():
    return build_xls


@pytest.fixture
def row_factory():
    return sample_row
