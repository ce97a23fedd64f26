"""Core infrastructure: settings, logging, errors and the entity store."""
