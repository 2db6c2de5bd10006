"""Output formats for flame trees."""
