from pydantic import BaseModel
from typing import Optional
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class AuthContext(BaseModel):
    """Identidad extraída de un token de acceso válido"""
    username: str
    role: Optional[str] = None
