"""Notification Sender - outbound admin and customer notices.

Invariants:
    - Implements core/repository_protocols.Notifier
    - Never renders templates; payloads are plain dicts

Design Decisions:
    - LoggingNotifier is the default wiring: it records each notice as a
      structured log line. A mail-backed sender plugs in through
      api/dependencies.get_notifier without touching services
"""

import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Notifier that writes every notice to the application log."""

    async def send_restock_notice(
        self, recipient: str, customer_name: str, product: dict,
    ) -> None:
        logger.info(
            f"Restock notice to {recipient} for {product.get('name')}",
            extra={"product_id": product.get("id")},
        )

    async def send_proposal_accepted(self, recipient: str, proposal: dict) -> None:
        logger.info(
            f"Proposal {proposal.get('proposal_number')} accepted, "
            f"notifying {recipient}",
            extra={"proposal_id": proposal.get("id")},
        )
