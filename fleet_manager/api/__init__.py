"""REST API serving the fleet management frontend."""
