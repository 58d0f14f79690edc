"""Console and logging display helpers."""
