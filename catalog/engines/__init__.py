"""Engines - pure, stateless processing over in-memory snapshots."""
