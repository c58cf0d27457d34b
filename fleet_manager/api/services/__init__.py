"""Fleet services: async classes over the fleet store returning plain dicts."""
from .company_service import CompanyService
from .dashboard_service import DashboardService
from .driver_service import DriverService
from .fuel_service import FuelFillupService
from .health_service import HealthService
from .issue_service import ExpenseService, IssueService
from .location_service import LocationService
from .maintenance_service import InspectionService, ServiceRecordService
from .records import RecordService
from .trip_service import TripService
from .vehicle_service import VehicleService

__all__ = [
    "CompanyService",
    "DashboardService",
    "DriverService",
    "ExpenseService",
    "FuelFillupService",
    "HealthService",
    "InspectionService",
    "IssueService",
    "LocationService",
    "RecordService",
    "ServiceRecordService",
    "TripService",
    "VehicleService",
]
