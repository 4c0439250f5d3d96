"""SQLite persistence for the durable key-value collaborator."""
