"""Application layer: ports, DTOs and engine services."""
