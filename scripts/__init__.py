"""Manual maintenance and diagnostic scripts."""
