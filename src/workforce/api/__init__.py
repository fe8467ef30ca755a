"""HTTP routing and shared request dependencies."""
