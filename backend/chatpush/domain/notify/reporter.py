"""Outcome reporting: log what a delivery attempt achieved. No retries, no raising."""
import logging

from chatpush.domain.notify.models import DeliveryReport

logger = logging.getLogger(__name__)


def report_delivery(report: DeliveryReport, label: str = "Notification") -> None:
    """
    Log aggregate counts, then failures in gateway order.

    A rejected multicast request is logged once with the number of tokens it
    carried; only tokens that failed on their own get a line each.
    """
    logger.info(
        "%s: %d messages sent, %d failures",
        label,
        report.success_count,
        report.failure_count,
    )
    if report.failure_count <= 0:
        return
    for error in dict.fromkeys(report.errors):
        rejected = sum(1 for o in report.outcomes if o.batch_rejected and o.error_message == error)
        logger.error("%s: multicast request for %d tokens rejected: %s", label, rejected, error)
    for outcome in report.outcomes:
        if not outcome.success and not outcome.batch_rejected:
            logger.error(
                "%s: error sending to token %s: %s",
                label,
                outcome.token,
                outcome.error_message or "unknown error",
            )
