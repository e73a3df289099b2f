"""WebSocket endpoint and connection management."""
