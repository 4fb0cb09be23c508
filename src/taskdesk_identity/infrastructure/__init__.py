"""Infrastructure adapters (durable record store, local storage)."""
