"""Plugins - per-catalog configuration of the shared engines."""
