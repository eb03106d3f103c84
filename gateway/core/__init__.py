"""Core configuration, logging, errors and lifecycle."""
