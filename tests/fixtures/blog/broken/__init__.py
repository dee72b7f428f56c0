"""Classes whose declarations cannot produce a schema."""
