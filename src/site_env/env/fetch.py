"""Fetch raw variable records from the variable service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from site_env.types import VariableRecord, as_records

if TYPE_CHECKING:
    from site_env.core.client import VariableServiceClient

logger = logging.getLogger(__name__)


async def fetch_envelope_items(
    client: VariableServiceClient,
    *,
    account_id: str | None,
    key: str | None = None,
    site_id: str | None = None,
) -> list[VariableRecord]:
    """Fetch one variable (when *key* is set) or all variables of an account/site.

    Without an *account_id* there is nothing to look up and no request is
    made. Any failure of the request yields an empty list: collaborators
    who are not account owners are denied access to shared variables, and
    that case is treated like having no shared variables at all. A transient
    network error is therefore indistinguishable from "no variables".

    Records that come back malformed are not tolerated; the validation error
    propagates.
    """
    if account_id is None:
        return []

    raw: list[dict[str, Any]]
    try:
        if key:
            logger.debug("Fetching variable %s (account=%s, site=%s)", key, account_id, site_id)
            raw = [await client.get_env_var(account_id=account_id, key=key, site_id=site_id)]
        else:
            logger.debug("Fetching variables (account=%s, site=%s)", account_id, site_id)
            raw = await client.get_env_vars(account_id=account_id, site_id=site_id)
    except Exception:
        logger.debug(
            "Variable fetch failed (account=%s, site=%s); treating as empty",
            account_id,
            site_id,
            exc_info=True,
        )
        return []

    return as_records(raw)
