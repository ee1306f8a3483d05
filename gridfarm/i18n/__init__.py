"""UI message catalogue."""
