"""A small service for keeping a list of movies to watch."""
