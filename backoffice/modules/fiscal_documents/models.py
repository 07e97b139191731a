"""
Fiscal documents imported from DIAN spreadsheet reports
"""
from sqlalchemy import Column, String, Date, Numeric, BigInteger, Integer
from backoffice.database.database import Base
from backoffice.common.mixins import TimestampMixin

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdentityType = BigInteger().with_variant(Integer, "sqlite")

MONEY = Numeric(19, 2)


class FiscalDocument(Base, TimestampMixin):
    """
    Documento fiscal (factura, nota crédito, etc.) con sus valores de impuestos.
    Los registros son inmutables una vez importados.
    """
    __tablename__ = "fiscal_documents"

    id = Column("fiscal_document_id", IdentityType, primary_key=True, autoincrement=True)

    # Identificación y clasificación
    document_type = Column(String(255), nullable=True)
    cufe_cude = Column(String(500), nullable=True, index=True)
    folio = Column(String(255), nullable=True)
    prefix = Column(String(255), nullable=True)
    currency = Column(String(255), nullable=True)
    payment_form = Column(String(255), nullable=True)
    payment_method = Column(String(255), nullable=True)

    # Fechas (sin hora)
    issue_date = Column(Date, nullable=True)
    reception_date = Column(Date, nullable=True)

    # Partes
    issuer_nit = Column(String(255), nullable=True)
    issuer_name = Column(String(500), nullable=True)
    receiver_nit = Column(String(255), nullable=True)
    receiver_name = Column(String(500), nullable=True)

    # Impuestos, retenciones y total
    iva = Column(MONEY, nullable=True)
    ica = Column(MONEY, nullable=True)
    ic = Column(MONEY, nullable=True)
    inc = Column(MONEY, nullable=True)
    timbre = Column(MONEY, nullable=True)
    inc_bags = Column(MONEY, nullable=True)
    in_carbon = Column(MONEY, nullable=True)
    in_fuels = Column(MONEY, nullable=True)
    ic_data = Column(MONEY, nullable=True)
    icl = Column(MONEY, nullable=True)
    inpp = Column(MONEY, nullable=True)
    ibua = Column(MONEY, nullable=True)
    icui = Column(MONEY, nullable=True)
    rete_iva = Column(MONEY, nullable=True)
    rete_rent = Column(MONEY, nullable=True)
    rete_ica = Column(MONEY, nullable=True)
    total = Column(MONEY, nullable=True)

    status = Column(String(255), nullable=True)
    group_info = Column(String(1000), nullable=True)

    def __repr__(self):
        return f"<FiscalDocument(id={self.id}, cufe_cude={self.cufe_cude}, folio={self.folio})>"
