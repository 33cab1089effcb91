"""Repository and service ports."""
