"""Infrastructure layer - transport, codecs and resilience."""
