"""Dashboard widget domain: models, store, ownership resolution and operations."""
