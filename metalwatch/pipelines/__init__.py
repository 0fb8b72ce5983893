"""Pipeline runners."""
