"""Cortex: the pipeline engine and the graphs built on it."""
