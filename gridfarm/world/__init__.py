"""World grid, tiles, and per-turn resource generation."""
