"""Network transport."""
