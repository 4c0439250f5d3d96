"""Output layer — renders ServiceResult as Rich text, quiet ids, or JSON."""
