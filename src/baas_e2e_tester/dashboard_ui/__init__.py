"""Dashboard UI exports."""

from .browser_sessions import PageOpener, open_dashboard_page
from .dashboard_navigation import DashboardNavigator

__all__ = ["DashboardNavigator", "PageOpener", "open_dashboard_page"]
