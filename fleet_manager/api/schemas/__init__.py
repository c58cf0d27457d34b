"""Pydantic schemas for API request/response models."""
from .dashboard import ChartData, DashboardStats
from .envelope import ApiResponse, ResponseMeta

__all__ = ["ApiResponse", "ChartData", "DashboardStats", "ResponseMeta"]
