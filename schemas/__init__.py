"""Sheet layout schemas."""
