"""Sales analytics computed on demand from the order store.

Nothing is cached: each report re-reads the orders and reduces them, so a
report may mix states of orders that changed while it was being computed.

Revenue reports (sales over time, popular items, category revenue, peak
hours and trends) count every order that has not been cancelled, so the
dashboard shows pipeline revenue and not only completed revenue. The
summary and status breakdown cover every order.
"""

import logging
import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta, tzinfo
from decimal import Decimal

from restaurant_manager.clock import Clock, utc_now
from restaurant_manager.errors import ValidationError
from restaurant_manager.models.analytics_models import (
    CategoryRevenue,
    DashboardSummary,
    PeakHour,
    PopularItem,
    RecentActivity,
    SalesBucket,
    StatusBreakdown,
    TrendPoint,
)
from restaurant_manager.models.common import round_money
from restaurant_manager.models.menu_models import MenuCategory
from restaurant_manager.models.order_models import Order, OrderStatus
from restaurant_manager.observability import traced
from restaurant_manager.observability.metrics import record_analytics_duration
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository
from restaurant_manager.services.query import as_aware

logger = logging.getLogger(__name__)

REVENUE_STATUSES = frozenset(
    {OrderStatus.PLACED, OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.DELIVERED}
)
PENDING_STATUSES = frozenset({OrderStatus.PLACED, OrderStatus.PREPARING})
COMPLETED_STATUSES = frozenset({OrderStatus.READY, OrderStatus.DELIVERED})

BUCKET_FORMATS = {"daily": "%Y-%m-%d", "monthly": "%Y-%m"}

ZERO = Decimal("0")


@contextmanager
def _measure(report: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        record_analytics_duration(report, time.perf_counter() - started)


def _average(total: Decimal, count: int) -> Decimal:
    return round_money(total / count) if count else round_money(ZERO)


class AnalyticsService:
    """Stateless aggregation over orders and the menu catalog."""

    def __init__(
        self,
        order_repository: OrderRepository,
        menu_repository: MenuItemRepository,
        clock: Clock = utc_now,
        timezone: tzinfo = UTC,
    ) -> None:
        """Initialize the AnalyticsService.

        Args:
            order_repository: Repository for orders
            menu_repository: Repository for menu items (category lookups)
            clock: Source of the current instant
            timezone: Zone defining calendar days, months and hours of day
        """
        self.order_repository = order_repository
        self.menu_repository = menu_repository
        self.clock = clock
        self.timezone = timezone

    def _local(self, instant: datetime) -> datetime:
        return instant.astimezone(self.timezone)

    def _revenue_orders(self) -> list[Order]:
        orders = [o for o in self.order_repository.list_orders() if o.status in REVENUE_STATUSES]
        return sorted(orders, key=lambda o: o.created_at)

    @traced("analytics.sales_over_time")
    async def sales_over_time(
        self,
        period: str = "daily",
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[SalesBucket]:
        """Sales and order counts per calendar day or month, oldest first.

        Args:
            period: "daily" or "monthly"
            start_date: Inclusive lower bound on creation instant
            end_date: Inclusive upper bound on creation instant

        Raises:
            ValidationError: For an unknown period
        """
        if period not in BUCKET_FORMATS:
            raise ValidationError(
                "Invalid analytics parameters", ["period: must be 'daily' or 'monthly'"]
            )
        start = as_aware(start_date) if start_date else None
        end = as_aware(end_date) if end_date else None

        with _measure("sales_over_time"):
            sales: dict[str, Decimal] = defaultdict(Decimal)
            counts: dict[str, int] = defaultdict(int)
            for order in self._revenue_orders():
                if start is not None and order.created_at < start:
                    continue
                if end is not None and order.created_at > end:
                    continue
                bucket = self._local(order.created_at).strftime(BUCKET_FORMATS[period])
                sales[bucket] += order.total_amount
                counts[bucket] += 1

            return [
                SalesBucket(
                    bucket=bucket, total_sales=round_money(sales[bucket]), order_count=counts[bucket]
                )
                for bucket in sorted(sales)
            ]

    @traced("analytics.popular_items")
    async def popular_items(self, limit: int = 10) -> list[PopularItem]:
        """Menu items ranked by total quantity ordered.

        Raises:
            ValidationError: If ``limit`` is below 1
        """
        if limit < 1:
            raise ValidationError("Invalid analytics parameters", ["limit: must be at least 1"])

        with _measure("popular_items"):
            names: dict[str, str] = {}
            quantities: dict[str, int] = defaultdict(int)
            revenue: dict[str, Decimal] = defaultdict(Decimal)
            for order in self._revenue_orders():
                for line in order.items:
                    names.setdefault(line.menu_item_id, line.name)
                    quantities[line.menu_item_id] += line.quantity
                    revenue[line.menu_item_id] += line.price * line.quantity

            # Highest quantity first, ties by name
            ranked = sorted(quantities, key=lambda item_id: (-quantities[item_id], names[item_id]))
            return [
                PopularItem(
                    menu_item_id=item_id,
                    item_name=names[item_id],
                    total_quantity_ordered=quantities[item_id],
                    total_revenue=round_money(revenue[item_id]),
                )
                for item_id in ranked[:limit]
            ]

    @traced("analytics.category_revenue")
    async def category_revenue(self) -> list[CategoryRevenue]:
        """Revenue and units per menu category, highest revenue first.

        The category comes from the current catalog record, not from the
        order snapshot, so re-categorizing an item moves its past revenue.
        Lines whose menu item no longer resolves are left out.
        """
        with _measure("category_revenue"):
            # Resolve categories from the live catalog
            categories = {item.id: item.category for item in self.menu_repository.list_items()}

            revenue: dict[MenuCategory, Decimal] = defaultdict(Decimal)
            units: dict[MenuCategory, int] = defaultdict(int)
            for order in self._revenue_orders():
                for line in order.items:
                    category = categories.get(line.menu_item_id)
                    if category is None:
                        continue
                    revenue[category] += line.price * line.quantity
                    units[category] += line.quantity

            ranked = sorted(revenue, key=lambda c: (-revenue[c], c.value))
            return [
                CategoryRevenue(
                    category=category,
                    total_revenue=round_money(revenue[category]),
                    item_count=units[category],
                )
                for category in ranked
            ]

    @traced("analytics.peak_hours")
    async def peak_hours(self) -> list[PeakHour]:
        """Orders and revenue per local hour of day, for hours with orders."""
        with _measure("peak_hours"):
            counts: dict[int, int] = defaultdict(int)
            revenue: dict[int, Decimal] = defaultdict(Decimal)
            for order in self._revenue_orders():
                hour = self._local(order.created_at).hour
                counts[hour] += 1
                revenue[hour] += order.total_amount

            return [
                PeakHour(
                    hour_of_day=hour,
                    order_count=counts[hour],
                    total_revenue=round_money(revenue[hour]),
                )
                for hour in sorted(counts)
            ]

    @traced("analytics.summary")
    async def summary(self) -> DashboardSummary:
        """Headline figures over every order regardless of status."""
        with _measure("summary"):
            orders = self.order_repository.list_orders()
            today = self._local(self.clock()).date()

            # Revenue covers every status here
            total_revenue = sum((o.total_amount for o in orders), ZERO)
            todays = [o for o in orders if self._local(o.created_at).date() == today]
            completed = [o for o in orders if o.status in COMPLETED_STATUSES]

            return DashboardSummary(
                total_revenue=round_money(total_revenue),
                total_orders=len(orders),
                average_order_value=_average(total_revenue, len(orders)),
                today_orders=len(todays),
                today_revenue=round_money(sum((o.total_amount for o in todays), ZERO)),
                pending_orders=sum(1 for o in orders if o.status in PENDING_STATUSES),
                completed_orders=len(completed),
                completed_revenue=round_money(sum((o.total_amount for o in completed), ZERO)),
            )

    @traced("analytics.trends")
    async def trends(self, days: int = 7) -> list[TrendPoint]:
        """Daily revenue over the trailing ``days``, oldest first.

        Raises:
            ValidationError: If ``days`` is below 1
        """
        if days < 1:
            raise ValidationError("Invalid analytics parameters", ["days: must be at least 1"])

        with _measure("trends"):
            since = self.clock() - timedelta(days=days)
            revenue: dict[str, Decimal] = defaultdict(Decimal)
            orders: dict[str, int] = defaultdict(int)
            completed_revenue: dict[str, Decimal] = defaultdict(Decimal)
            completed_orders: dict[str, int] = defaultdict(int)

            for order in self._revenue_orders():
                if order.created_at < since:
                    continue
                day = self._local(order.created_at).strftime(BUCKET_FORMATS["daily"])
                revenue[day] += order.total_amount
                orders[day] += 1
                if order.status in COMPLETED_STATUSES:
                    completed_revenue[day] += order.total_amount
                    completed_orders[day] += 1

            return [
                TrendPoint(
                    date=day,
                    revenue=round_money(revenue[day]),
                    orders=orders[day],
                    completed_revenue=round_money(completed_revenue[day]),
                    completed_orders=completed_orders[day],
                )
                for day in sorted(revenue)
            ]

    @traced("analytics.status_breakdown")
    async def status_breakdown(self) -> list[StatusBreakdown]:
        """Count and value of orders per status, most common first."""
        with _measure("status_breakdown"):
            counts: dict[OrderStatus, int] = defaultdict(int)
            revenue: dict[OrderStatus, Decimal] = defaultdict(Decimal)
            for order in self.order_repository.list_orders():
                counts[order.status] += 1
                revenue[order.status] += order.total_amount

            ranked = sorted(counts, key=lambda s: (-counts[s], s.value))
            return [
                StatusBreakdown(
                    status=status,
                    count=counts[status],
                    total_revenue=round_money(revenue[status]),
                    average_value=_average(revenue[status], counts[status]),
                )
                for status in ranked
            ]

    @traced("analytics.recent_activity")
    async def recent_activity(self, window_minutes: int = 60) -> RecentActivity:
        """Orders placed in the trailing window plus current kitchen gauges.

        Raises:
            ValidationError: If ``window_minutes`` is below 1
        """
        if window_minutes < 1:
            raise ValidationError(
                "Invalid analytics parameters", ["windowMinutes: must be at least 1"]
            )

        with _measure("recent_activity"):
            now = self.clock()
            since = now - timedelta(minutes=window_minutes)
            orders = self.order_repository.list_orders()
            recent = [o for o in orders if o.created_at >= since]

            # Kitchen gauges count current state, not the window
            return RecentActivity(
                window_minutes=window_minutes,
                recent_orders=len(recent),
                recent_revenue=round_money(sum((o.total_amount for o in recent), ZERO)),
                currently_preparing=sum(1 for o in orders if o.status == OrderStatus.PREPARING),
                ready_for_pickup=sum(1 for o in orders if o.status == OrderStatus.READY),
                timestamp=now,
            )
