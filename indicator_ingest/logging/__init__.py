"""Console logging setup and the JSON Lines diagnostic log."""
