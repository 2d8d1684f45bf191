"""Loading note files."""
