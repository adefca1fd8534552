"""Blog platform backend."""
