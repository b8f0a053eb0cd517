"""Static category vocabulary."""
