"""HTTP and WebSocket access to a running cab simulation."""
