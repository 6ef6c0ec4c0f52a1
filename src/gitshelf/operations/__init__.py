"""Browsing operations composed from object-graph primitives."""
