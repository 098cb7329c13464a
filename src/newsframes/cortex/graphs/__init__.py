"""Concrete pipelines built on the cortex engine."""
