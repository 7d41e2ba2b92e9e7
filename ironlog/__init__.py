"""Ironlog: workout logging API."""
