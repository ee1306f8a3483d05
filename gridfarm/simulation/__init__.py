"""Session orchestration and configuration."""
