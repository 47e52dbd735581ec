"""ECU tuning job coordination service."""
