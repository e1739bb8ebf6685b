"""Core module containing cross-cutting concerns."""
