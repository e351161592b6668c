"""Core infrastructure: configuration, logging, telemetry and database."""
