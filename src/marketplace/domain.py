"""Marketplace domain: order fulfillment and inventory core.

Providers list records (physical vinyl or digital files) against a shared
album catalog. This domain covers splitting buyer orders into
provider-scoped line items, the per-item fulfillment lifecycle, and the
stock ledger with its single-item and bulk mutations.
"""

import structlog
from protean.domain import Domain

from marketplace.utils.logging import configure_logging

configure_logging()

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
