"""Synchronous command dispatch for the API and the stock services."""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from marketplace.shared.exceptions import ConflictError

logger = structlog.get_logger(__name__)


def process(command):
    """Process ``command`` inline and return the handler's result.

    A stale aggregate version, detected when the repository saves or when
    the unit of work commits, is raised as ``ConflictError``.
    """
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        logger.warning("concurrent_update_rejected", command=command.__class__.__name__, detail=str(exc))
        raise ConflictError(
            {"_entity": ["The record was changed by another request, reload it and retry"]}
        ) from exc
