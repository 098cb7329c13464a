"""Step executors: generation, function and parallel-group steps."""
