"""Structured logging for trip and cart lifecycle events."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredLifecycleLogger:
    """Structured logger for trip status transitions and cart mutations."""

    def log_transition(
        self,
        trip_id: str,
        from_status: str | None,
        to_status: str,
        applied: bool = True,
        reason: str | None = None,
    ) -> None:
        """Log a trip status transition attempt with structured data."""
        log_data: dict[str, Any] = {
            "trip_id": trip_id,
            "from": from_status,
            "to": to_status,
            "applied": applied,
        }

        if reason:
            log_data["reason"] = reason

        log_msg = f"Trip transition: {from_status} -> {to_status}"

        if applied:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(f"{log_msg} (ignored)", extra={"structured": log_data})

    def log_cart_op(
        self,
        op: str,
        owner_id: str,
        trip_id: str,
        item_count: int,
        total_amount: float,
        attempt: int = 1,
    ) -> None:
        """Log a cart mutation with structured data."""
        log_data: dict[str, Any] = {
            "op": op,
            "owner_id": owner_id,
            "trip_id": trip_id,
            "item_count": item_count,
            "total_amount": round(total_amount, 2),
            "attempt": attempt,
        }

        logger.info(f"Cart op: {op}", extra={"structured": log_data})
