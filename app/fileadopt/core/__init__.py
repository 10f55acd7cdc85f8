"""Core building blocks: URIs, ignore patterns, tree walking and configuration."""
