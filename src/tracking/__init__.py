"""Generation callbacks and call records."""
