"""Plugin system — pluggy hooks for notifications and lifecycle events."""
