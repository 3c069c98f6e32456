"""Click sub-command groups."""
