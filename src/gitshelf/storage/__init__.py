"""Storage layer: object-graph adapters and the stats cache."""
