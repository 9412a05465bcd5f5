"""Core utilities shared across securethis."""
