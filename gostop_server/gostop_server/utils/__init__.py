"""Process logging and console display."""
