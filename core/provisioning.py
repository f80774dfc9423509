"""Seller provisioning: create-or-locate an account, then promote it to seller."""

from __future__ import annotations

import logging

from core.backend import AccountService, ProfileStore
from core.models import SELLER_ROLE, AccountResolution, ResolutionOutcome

logger = logging.getLogger(__name__)

# Supabase reports an already-registered email as 422; 409 is the generic conflict.
CONFLICT_STATUSES = frozenset({409, 422})


def resolve_account(accounts: AccountService, email: str, password: str) -> AccountResolution:
    """Create the account for ``email`` or recover the identifier of an existing one.

    Running this twice for the same email yields ``created`` and then
    ``found_existing`` with the same identifier.
    """
    creation = accounts.create(email, password)

    if creation.account_id and creation.status_code not in CONFLICT_STATUSES:
        return AccountResolution(ResolutionOutcome.CREATED, creation.account_id)

    existing_id = accounts.find_id_by_email(email)
    if existing_id:
        logger.info("Account for %s already exists as %s", email, existing_id)
        return AccountResolution(ResolutionOutcome.FOUND_EXISTING, existing_id)

    logger.warning("Could not resolve an account id for %s (create status=%d)", email, creation.status_code)
    return AccountResolution(ResolutionOutcome.UNRESOLVABLE)


def provision_seller(
    accounts: AccountService,
    profiles: ProfileStore,
    email: str,
    password: str,
) -> AccountResolution:
    """Ensure one account exists for ``email`` and its profile has the seller role.

    Returns the resolution without touching profiles when it is unresolvable.
    Profile failures propagate as ``UpstreamError``; an account created in
    this run is left in place.
    """
    resolution = resolve_account(accounts, email, password)
    if not resolution.resolved:
        return resolution

    try:
        profiles.upsert_role(resolution.account_id, SELLER_ROLE)
    except Exception:
        if resolution.outcome is ResolutionOutcome.CREATED:
            logger.warning("Account %s was created but its seller profile was not written", resolution.account_id)
        raise

    logger.info("Account %s is now a seller (%s)", resolution.account_id, resolution.outcome.value)
    return resolution
