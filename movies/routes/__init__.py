"""Blueprints for the movies application."""
