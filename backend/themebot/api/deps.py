"""
FastAPI dependencies: static bearer check and access to the objects wired by
`create_app` (settings, gateway, ingestor) through `app.state`.
"""
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param

from themebot.core.config import Settings
from themebot.services.gateway import ThemeGateway
from themebot.services.ingestion import ThemeIngestor

LOG = logging.getLogger(__name__)

HTTPBearerScheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> ThemeGateway:
    return request.app.state.gateway


def get_ingestor(request: Request) -> ThemeIngestor:
    return request.app.state.ingestor


def token_matches(secret: str, token: str | None) -> bool:
    return bool(secret) and bool(token) and token == secret


def request_has_valid_token(request: Request) -> bool:
    """Same check as require_api_token, usable before dependencies run."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer":
        return False
    return token_matches(request.app.state.settings.api_secret, token)


async def require_api_token(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(HTTPBearerScheme),
    ],
) -> None:
    """
    Compare the Bearer token with the configured secret (plain equality).
    Missing header, other scheme, wrong token or no configured secret: 403.
    """
    token = credentials.credentials if credentials else None
    if not token_matches(request.app.state.settings.api_secret, token):
        LOG.error("Bearer token mismatch %s %s", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


SettingsDep = Annotated[Settings, Depends(get_settings)]
GatewayDep = Annotated[ThemeGateway, Depends(get_gateway)]
IngestorDep = Annotated[ThemeIngestor, Depends(get_ingestor)]
