"""Persistence of per-tick population metrics."""
