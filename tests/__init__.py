"""Tests for the movies service."""
