"""
Pydantic schemas for fiscal documents
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from decimal import Decimal
from typing import Optional
from datetime import date, datetime


class FiscalDocumentBase(BaseModel):
    document_type: Optional[str] = None
    cufe_cude: Optional[str] = None
    folio: Optional[str] = None
    prefix: Optional[str] = None
    currency: Optional[str] = None
    payment_form: Optional[str] = None
    payment_method: Optional[str] = None
    issue_date: Optional[date] = None
    reception_date: Optional[date] = None
    issuer_nit: Optional[str] = None
    issuer_name: Optional[str] = None
    receiver_nit: Optional[str] = None
    receiver_name: Optional[str] = None
    iva: Optional[Decimal] = None
    ica: Optional[Decimal] = None
    ic: Optional[Decimal] = None
    inc: Optional[Decimal] = None
    timbre: Optional[Decimal] = None
    inc_bags: Optional[Decimal] = None
    in_carbon: Optional[Decimal] = None
    in_fuels: Optional[Decimal] = None
    ic_data: Optional[Decimal] = None
    icl: Optional[Decimal] = None
    inpp: Optional[Decimal] = None
    ibua: Optional[Decimal] = None
    icui: Optional[Decimal] = None
    rete_iva: Optional[Decimal] = None
    rete_rent: Optional[Decimal] = None
    rete_ica: Optional[Decimal] = None
    total: Optional[Decimal] = None
    status: Optional[str] = None
    group_info: Optional[str] = None


class FiscalDocumentCreate(FiscalDocumentBase):
    """Fila de la hoja ya convertida; aún sin identidad"""
    model_config = ConfigDict(frozen=True)


class FiscalDocumentOut(FiscalDocumentBase):
    """Documento fiscal persistido, serializado con nombres camelCase"""
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )
