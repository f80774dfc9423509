"""Serverless function: create a seller, or promote an existing account to seller."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.backend import AccountService, ProfileStore, SupabaseAccountService, SupabaseProfileStore, build_client
from core.config import Settings, get_settings
from core.errors import HandlerError, UpstreamError
from core.http import json_response, method_of, parse_json_body
from core.provisioning import provision_seller

logger = logging.getLogger(__name__)


def handle(
    event: dict[str, Any],
    settings: Settings,
    accounts: AccountService | None = None,
    profiles: ProfileStore | None = None,
) -> dict[str, Any]:
    """Create or locate the account for ``email`` and give it the seller role.

    ``accounts`` and ``profiles`` default to the Supabase implementations.
    """
    if method_of(event) != "POST":
        return json_response(405, {"error": "Method not allowed"})

    try:
        body = parse_json_body(event)
        email, password = body.get("email"), body.get("password")
        if not email or not password or not isinstance(email, str) or not isinstance(password, str):
            raise HandlerError(400, {"error": "Email y contraseña son obligatorios"})
        if not settings.backend_configured:
            raise HandlerError(500, {"error": "Variables de entorno faltantes"})

        if accounts is not None and profiles is not None:
            return _provision(accounts, profiles, email, password)
        with build_client(settings) as client:
            return _provision(
                accounts or SupabaseAccountService(client),
                profiles or SupabaseProfileStore(client),
                email,
                password,
            )
    except HandlerError as e:
        return json_response(e.status, e.payload)
    except Exception as e:
        logger.exception("create-seller failed")
        return json_response(500, {"error": str(e)})


def _provision(accounts: AccountService, profiles: ProfileStore, email: str, password: str) -> dict[str, Any]:
    try:
        resolution = provision_seller(accounts, profiles, email, password)
    except UpstreamError as e:
        return json_response(500, {"error": "Falló al asignar rol seller", "detail": e.detail})

    if not resolution.resolved:
        return json_response(422, {"error": "No se pudo obtener ID de usuario"})
    return json_response(200, {"message": "Vendedor creado", "userId": resolution.account_id})


def handler(event, context=None):
    """Serverless entrypoint."""
    return handle(event, get_settings())
