from fastapi import Depends
from sqlalchemy.orm import Session
from typing import Annotated
from backoffice.database.database import get_db

# Synchronous database dependency; the ingestion pipeline is request-scoped and sequential
db_dependency = Annotated[Session, Depends(get_db)]
