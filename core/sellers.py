"""Seller listing and account maintenance."""

from __future__ import annotations

import logging

from core.backend import AccountService, ProfileStore
from core.errors import UpstreamError
from core.models import SELLER_ROLE, SellerListing

logger = logging.getLogger(__name__)


def list_sellers(accounts: AccountService, profiles: ProfileStore) -> SellerListing:
    """Join seller profiles with their account emails, keeping profile order.

    A failure listing profiles propagates. A failed per-account lookup only
    drops that seller from ``sellers`` and records it in ``omitted_ids``.
    """
    listing = SellerListing()
    for account_id in profiles.ids_with_role(SELLER_ROLE):
        try:
            listing.sellers.append(accounts.get(account_id))
        except UpstreamError as e:
            logger.warning("Skipping seller %s: account lookup failed (%s)", account_id, e.status)
            listing.omitted_ids.append(account_id)

    if listing.omitted_ids:
        logger.warning(
            "Listed %d sellers, omitted %d: %s",
            len(listing.sellers), listing.omitted_count, ", ".join(listing.omitted_ids),
        )
    else:
        logger.info("Listed %d sellers", len(listing.sellers))
    return listing


def update_seller_password(accounts: AccountService, account_id: str, password: str) -> None:
    accounts.update_password(account_id, password)


def delete_seller(accounts: AccountService, account_id: str) -> None:
    # The profiles row is removed by the ON DELETE CASCADE on auth.users.
    accounts.delete(account_id)
