"""Service integrations for the movies application."""
