"""Fleet management backend: vehicles, drivers, trips, fuel, maintenance, costs."""

__version__ = "1.0.0"
