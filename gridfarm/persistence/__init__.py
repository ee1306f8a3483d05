"""Save slots over pluggable storage backends."""
