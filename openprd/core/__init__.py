"""Core services: key vault, connectivity prober, generation pipeline."""
