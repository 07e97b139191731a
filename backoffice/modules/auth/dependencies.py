"""
Dependencias de autenticación para FastAPI.

La emisión de tokens y la gestión de usuarios viven fuera de este servicio;
aquí solo se verifica el token portador y el rol que declara.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
import logging

from backoffice.modules.auth.schemas import AuthContext, Role
from backoffice.modules.auth.utils import decode_access_token

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer()


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_auth_context(
        credentials: HTTPAuthorizationCredentials = Depends(security)
    ) -> AuthContext:
        """Obtener el contexto de autenticación desde el token JWT."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudieron validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = decode_access_token(credentials.credentials)
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected bearer token: {e}")
            raise credentials_exception

        username = payload.get("sub")
        if username is None:
            raise credentials_exception

        return AuthContext(username=username, role=payload.get("role"))

    @staticmethod
    def require_role(allowed_roles: list[str]):
        """
        Dependencia para requerir roles específicos.
        """
        def role_checker(auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)):
            if auth_context.role not in allowed_roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Se requiere uno de estos roles: {', '.join(allowed_roles)}"
                )
            return auth_context
        return role_checker

    @staticmethod
    def require_any_role():
        """Dependencia que requiere cualquier rol válido."""
        return AuthDependencies.require_role([Role.ADMIN.value, Role.USER.value])
