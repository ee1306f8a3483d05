"""Scenario tables and victory evaluation."""
