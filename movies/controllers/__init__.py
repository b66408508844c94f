"""Request controllers for the movies API."""
