"""gridfarm — a turn-based grid farming game."""
