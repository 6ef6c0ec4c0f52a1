"""Pure engine helpers: cache-key derivation."""
