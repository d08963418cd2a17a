"""Herald: admin notification pipeline."""
