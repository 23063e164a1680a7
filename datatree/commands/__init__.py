"""Click command groups for the DataTree CLI."""
