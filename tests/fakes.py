"""In-memory stand-ins for the Supabase and Gemini services."""

from __future__ import annotations

import uuid
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.backend import AccountService, ProfileStore
from core.errors import UpstreamError
from core.insights import InsightGenerator
from core.models import Account, AccountCreation, Insight, InsightMode


class FakeAccountService(AccountService):
    def __init__(self, unreachable_ids: tuple[str, ...] = (), lookup_finds_nothing: bool = False) -> None:
        self.accounts: dict[str, Account] = {}
        self.passwords: dict[str, str] = {}
        self.unreachable_ids = set(unreachable_ids)
        self.lookup_finds_nothing = lookup_finds_nothing
        self.calls: list[tuple[str, ...]] = []

    def add(self, email: str, password: str = "secret") -> str:
        account_id = str(uuid.uuid4())
        self.accounts[account_id] = Account(id=account_id, email=email)
        self.passwords[account_id] = password
        return account_id

    def create(self, email: str, password: str) -> AccountCreation:
        self.calls.append(("create", email))
        if any(a.email == email for a in self.accounts.values()):
            return AccountCreation(status_code=422)
        return AccountCreation(status_code=200, account_id=self.add(email, password))

    def find_id_by_email(self, email: str) -> str | None:
        self.calls.append(("find", email))
        if self.lookup_finds_nothing:
            return None
        for account in self.accounts.values():
            if account.email == email:
                return account.id
        return None

    def get(self, account_id: str) -> Account:
        self.calls.append(("get", account_id))
        if account_id in self.unreachable_ids or account_id not in self.accounts:
            raise UpstreamError(404, {"msg": "User not found"})
        return self.accounts[account_id]

    def update_password(self, account_id: str, password: str) -> None:
        self.calls.append(("update_password", account_id))
        if account_id not in self.accounts:
            raise UpstreamError(404, {"msg": "User not found"})
        self.passwords[account_id] = password

    def delete(self, account_id: str) -> None:
        self.calls.append(("delete", account_id))
        if account_id not in self.accounts:
            raise UpstreamError(404, {"msg": "User not found"})
        del self.accounts[account_id]


class FakeProfileStore(ProfileStore):
    def __init__(self, fail_upsert: bool = False, fail_list: bool = False) -> None:
        self.roles: dict[str, str] = {}
        self.fail_upsert = fail_upsert
        self.fail_list = fail_list
        self.calls: list[tuple[str, ...]] = []

    def upsert_role(self, account_id: str, role: str) -> None:
        self.calls.append(("upsert", account_id, role))
        if self.fail_upsert:
            raise UpstreamError(409, "duplicate key value violates unique constraint")
        self.roles[account_id] = role

    def ids_with_role(self, role: str) -> list[str]:
        self.calls.append(("list", role))
        if self.fail_list:
            raise UpstreamError(401, {"message": "Invalid API key"})
        return [account_id for account_id, r in self.roles.items() if r == role]


class RecordingGenerator(InsightGenerator):
    mode = InsightMode.GEMINI

    def __init__(self, text: str = "Las ventas crecieron.") -> None:
        self.text = text
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        return Insight(analysis=self.text, mode=self.mode)
