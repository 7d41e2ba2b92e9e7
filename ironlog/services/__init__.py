"""Domain services: catalog, validation, persistence, queries."""
