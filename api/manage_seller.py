"""Serverless function: list, re-password and delete sellers.

- GET: sellers as ``[{id, email}]``. Sellers whose account lookup failed are
  left out of the body and counted in the ``X-Omitted-Sellers`` header.
- PUT / PATCH: ``{id, password}`` updates the seller's password.
- DELETE: ``?id=`` removes the seller's account (its profile cascades).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.backend import AccountService, ProfileStore, SupabaseAccountService, SupabaseProfileStore, build_client
from core.config import Settings, get_settings
from core.errors import UpstreamError
from core.http import json_response, method_of, parse_json_body, query_param
from core.sellers import delete_seller, list_sellers, update_seller_password

logger = logging.getLogger(__name__)

OMITTED_HEADER = "X-Omitted-Sellers"


def handle(
    event: dict[str, Any],
    settings: Settings,
    accounts: AccountService | None = None,
    profiles: ProfileStore | None = None,
) -> dict[str, Any]:
    if not settings.backend_configured:
        return json_response(500, {"message": "Faltan variables de entorno SUPABASE_URL o SERVICE_ROLE_KEY"})

    method = method_of(event)
    if method not in ("GET", "PUT", "PATCH", "DELETE"):
        return json_response(405, {"message": "Método no permitido"})

    try:
        if accounts is not None and profiles is not None:
            return _dispatch(method, event, accounts, profiles)
        with build_client(settings) as client:
            return _dispatch(
                method,
                event,
                accounts or SupabaseAccountService(client),
                profiles or SupabaseProfileStore(client),
            )
    except Exception as e:
        logger.exception("manage-seller %s failed", method)
        return json_response(500, {"message": str(e)})


def _dispatch(method: str, event: dict[str, Any], accounts: AccountService, profiles: ProfileStore) -> dict[str, Any]:
    if method == "GET":
        return _list(accounts, profiles)
    if method in ("PUT", "PATCH"):
        return _update(event, accounts)
    return _delete(event, accounts)


def _list(accounts: AccountService, profiles: ProfileStore) -> dict[str, Any]:
    try:
        listing = list_sellers(accounts, profiles)
    except UpstreamError as e:
        return json_response(e.status, {"message": "Error obteniendo perfiles", "detail": e.detail})
    return json_response(200, listing.to_list(), headers={OMITTED_HEADER: str(listing.omitted_count)})


def _update(event: dict[str, Any], accounts: AccountService) -> dict[str, Any]:
    try:
        body = parse_json_body(event)
    except ValueError:
        body = {}
    account_id, password = body.get("id"), body.get("password")
    if not account_id or not password:
        return json_response(400, {"message": "id y password son obligatorios"})

    try:
        update_seller_password(accounts, account_id, password)
    except UpstreamError as e:
        return json_response(e.status, {"message": "Error actualizando contraseña", "detail": e.detail})
    return json_response(200, {"message": "Contraseña actualizada"})


def _delete(event: dict[str, Any], accounts: AccountService) -> dict[str, Any]:
    account_id = query_param(event, "id")
    if not account_id:
        return json_response(400, {"message": "id es obligatorio para eliminar"})

    try:
        delete_seller(accounts, account_id)
    except UpstreamError as e:
        return json_response(e.status, {"message": "Error eliminando usuario", "detail": e.detail})
    return json_response(200, {"message": "Vendedor eliminado"})


def handler(event, context=None):
    """Serverless entrypoint."""
    return handle(event, get_settings())
