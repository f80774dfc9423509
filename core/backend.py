"""Supabase account and profile service interfaces and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import httpx

from core.config import Settings
from core.errors import UpstreamError
from core.models import Account, AccountCreation

logger = logging.getLogger(__name__)

ADMIN_USERS_PATH = "/auth/v1/admin/users"
PROFILES_PATH = "/rest/v1/profiles"
MERGE_DUPLICATES = "resolution=merge-duplicates"


class AccountService(ABC):
    """Admin operations on auth accounts."""

    @abstractmethod
    def create(self, email: str, password: str) -> AccountCreation:
        """Create a pre-confirmed account. Conflicts are reported, not raised."""

    @abstractmethod
    def find_id_by_email(self, email: str) -> str | None:
        ...

    @abstractmethod
    def get(self, account_id: str) -> Account:
        ...

    @abstractmethod
    def update_password(self, account_id: str, password: str) -> None:
        ...

    @abstractmethod
    def delete(self, account_id: str) -> None:
        ...


class ProfileStore(ABC):
    """Row-store access to the ``profiles`` table."""

    @abstractmethod
    def upsert_role(self, account_id: str, role: str) -> None:
        """Insert or merge a profile row so it ends up with ``role``."""

    @abstractmethod
    def ids_with_role(self, role: str) -> list[str]:
        ...


def build_client(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Create an HTTP client authenticated with the service role key."""
    key = settings.service_role_key
    return httpx.Client(
        base_url=settings.supabase_url,
        headers={
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        },
        timeout=settings.http_timeout,
        transport=transport,
    )


def decode_body(resp: httpx.Response) -> Any:
    """Parsed JSON when possible, raw text otherwise."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _account_path(account_id: str) -> str:
    return f"{ADMIN_USERS_PATH}/{quote(str(account_id), safe='')}"


def _candidate_accounts(data: Any) -> list[dict[str, Any]]:
    # The admin API has answered lookups as a bare list, {"user": {...}}
    # and {"users": [...]} depending on version.
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if isinstance(data, dict):
        if isinstance(data.get("user"), dict):
            return [data["user"]]
        if isinstance(data.get("users"), list):
            return [item for item in data["users"] if isinstance(item, dict)]
    return []


class SupabaseAccountService(AccountService):
    """Supabase Auth admin API."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def create(self, email: str, password: str) -> AccountCreation:
        logger.info("Creating auth account for %s", email)
        resp = self.client.post(
            ADMIN_USERS_PATH,
            json={"email": email, "password": password, "email_confirm": True},
        )
        data = decode_body(resp)
        if not isinstance(data, dict):
            data = {}

        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        account_id = user.get("id") or data.get("id") or None
        logger.info("Create account returned status=%d id_present=%s", resp.status_code, bool(account_id))
        return AccountCreation(status_code=resp.status_code, account_id=account_id)

    def find_id_by_email(self, email: str) -> str | None:
        logger.info("Looking up existing auth account for %s", email)
        resp = self.client.get(ADMIN_USERS_PATH, params={"email": email})
        if not resp.is_success:
            logger.warning("Account lookup failed with status %d", resp.status_code)
            return None

        # The admin API may ignore the email filter and return a page of unrelated
        # users, so only an entry with the same email identifies the account.
        wanted = email.strip().lower()
        for candidate in _candidate_accounts(decode_body(resp)):
            if str(candidate.get("email", "")).strip().lower() == wanted and candidate.get("id"):
                return candidate["id"]
        logger.info("No account with email %s in lookup response", email)
        return None

    def get(self, account_id: str) -> Account:
        resp = self.client.get(_account_path(account_id))
        data = decode_body(resp)
        if not resp.is_success or not data:
            raise UpstreamError(resp.status_code, data)
        email = data.get("email", "") if isinstance(data, dict) else ""
        return Account(id=account_id, email=email or "")

    def update_password(self, account_id: str, password: str) -> None:
        logger.info("Updating password for account %s", account_id)
        resp = self.client.patch(_account_path(account_id), json={"password": password})
        if not resp.is_success:
            raise UpstreamError(resp.status_code, decode_body(resp))

    def delete(self, account_id: str) -> None:
        logger.info("Deleting account %s", account_id)
        resp = self.client.delete(_account_path(account_id))
        if not resp.is_success:
            raise UpstreamError(resp.status_code, decode_body(resp))


class SupabaseProfileStore(ProfileStore):
    """Supabase PostgREST access to ``profiles``."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def upsert_role(self, account_id: str, role: str) -> None:
        logger.info("Upserting profile %s with role=%s", account_id, role)
        resp = self.client.post(
            PROFILES_PATH,
            json={"id": account_id, "role": role},
            headers={"Prefer": MERGE_DUPLICATES},
        )
        if not resp.is_success:
            raise UpstreamError(resp.status_code, resp.text)

    def ids_with_role(self, role: str) -> list[str]:
        resp = self.client.get(PROFILES_PATH, params={"role": f"eq.{role}", "select": "id"})
        data = decode_body(resp)
        if not resp.is_success:
            raise UpstreamError(resp.status_code, data)
        if not isinstance(data, list):
            raise UpstreamError(502, data)
        return [row["id"] for row in data if isinstance(row, dict) and row.get("id")]
