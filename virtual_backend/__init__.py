"""In-memory backend simulation for the denuncias platform."""
