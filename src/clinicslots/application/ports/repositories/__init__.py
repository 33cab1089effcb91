"""Repository interfaces for data access abstraction."""
