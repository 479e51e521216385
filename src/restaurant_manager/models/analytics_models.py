"""Report shapes produced by the analytics service."""

from datetime import datetime

from restaurant_manager.models.common import CamelModel, Money
from restaurant_manager.models.menu_models import MenuCategory
from restaurant_manager.models.order_models import OrderStatus


class SalesBucket(CamelModel):
    """Sales for one calendar day ("2024-01-15") or month ("2024-01")."""

    bucket: str
    total_sales: Money
    order_count: int


class PopularItem(CamelModel):
    """Quantity and revenue ordered for one menu item."""

    menu_item_id: str
    item_name: str
    total_quantity_ordered: int
    total_revenue: Money


class CategoryRevenue(CamelModel):
    """Revenue and units ordered for one menu category."""

    category: MenuCategory
    total_revenue: Money
    item_count: int


class PeakHour(CamelModel):
    """Orders and revenue for one hour of the day (0-23)."""

    hour_of_day: int
    order_count: int
    total_revenue: Money


class DashboardSummary(CamelModel):
    """Headline dashboard figures."""

    total_revenue: Money
    total_orders: int
    average_order_value: Money
    today_orders: int
    today_revenue: Money
    pending_orders: int
    completed_orders: int
    completed_revenue: Money


class TrendPoint(CamelModel):
    """One day of the trailing revenue trend."""

    date: str
    revenue: Money
    orders: int
    completed_revenue: Money
    completed_orders: int


class StatusBreakdown(CamelModel):
    """Order count and value for one status."""

    status: OrderStatus
    count: int
    total_revenue: Money
    average_value: Money


class RecentActivity(CamelModel):
    """Trailing-window activity plus current kitchen gauges."""

    window_minutes: int
    recent_orders: int
    recent_revenue: Money
    currently_preparing: int
    ready_for_pickup: int
    timestamp: datetime
