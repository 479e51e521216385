"""Custom metrics for the restaurant service."""

from opentelemetry import metrics

meter = metrics.get_meter("restaurant-svc")

orders_created_counter = meter.create_counter(
    name="orders_created_total",
    description="Total number of orders created by order type",
    unit="1",
)

order_revenue_counter = meter.create_counter(
    name="order_revenue_total",
    description="Sum of order totals at creation time",
    unit="1",
)

status_transition_counter = meter.create_counter(
    name="order_status_transitions_total",
    description="Accepted order status transitions",
    unit="1",
)

rejected_transition_counter = meter.create_counter(
    name="order_status_transitions_rejected_total",
    description="Order status transitions rejected by the lifecycle",
    unit="1",
)

analytics_duration_histogram = meter.create_histogram(
    name="analytics_report_duration_seconds",
    description="Time spent computing an analytics report",
    unit="s",
)


def record_order_created(order_type: str, total_amount: float) -> None:
    """Record a newly created order.

    Args:
        order_type: dine-in, takeout or delivery
        total_amount: Order total
    """
    orders_created_counter.add(1, {"order_type": order_type})
    order_revenue_counter.add(total_amount, {"order_type": order_type})


def record_status_transition(from_status: str, to_status: str) -> None:
    """Record an accepted status transition."""
    status_transition_counter.add(1, {"from_status": from_status, "to_status": to_status})


def record_rejected_transition(from_status: str, to_status: str) -> None:
    """Record a status transition the lifecycle refused."""
    rejected_transition_counter.add(1, {"from_status": from_status, "to_status": to_status})


def record_analytics_duration(report: str, duration_seconds: float) -> None:
    """Record how long a report took to compute.

    Args:
        report: Report name (e.g. "summary", "peak_hours")
        duration_seconds: Duration in seconds
    """
    analytics_duration_histogram.record(duration_seconds, {"report": report})
