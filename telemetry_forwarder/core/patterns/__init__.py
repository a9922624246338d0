"""Reusable resilience and lifecycle patterns."""
