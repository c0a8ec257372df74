"""Infrastructure adapters: in-memory stubs, observability and monitoring."""
