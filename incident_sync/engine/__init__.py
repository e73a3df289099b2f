"""Hub-side engine: incident store, broadcast hub, seed dataset."""
