"""Prometheus metrics for trip and cart operations."""

from prometheus_client import Counter, Histogram

trips_created_total = Counter(
    "trips_created_total",
    "Total trips created",
)

itinerary_generation_total = Counter(
    "itinerary_generation_total",
    "Itinerary generation runs by outcome",
    ["outcome"],
)

itinerary_generation_seconds = Histogram(
    "itinerary_generation_seconds",
    "Itinerary generation latency in seconds",
    ["outcome"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60],
)

cart_write_conflicts_total = Counter(
    "cart_write_conflicts_total",
    "Cart compare-and-swap writes that lost to a concurrent writer",
)

checkouts_total = Counter(
    "checkouts_total",
    "Checkout attempts by outcome",
    ["outcome"],
)


class PrometheusTripMetrics:
    """Prometheus-based trip and cart metrics."""

    def inc_trip_created(self) -> None:
        """Increment trips created counter."""
        trips_created_total.inc()

    def record_generation(self, outcome: str, latency_s: float) -> None:
        """Record a finished generation run."""
        itinerary_generation_total.labels(outcome=outcome).inc()
        itinerary_generation_seconds.labels(outcome=outcome).observe(latency_s)

    def inc_cart_conflict(self) -> None:
        """Increment cart write conflict counter."""
        cart_write_conflicts_total.inc()

    def inc_checkout(self, outcome: str) -> None:
        """Increment checkout counter."""
        checkouts_total.labels(outcome=outcome).inc()
