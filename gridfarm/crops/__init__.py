"""Crop species rules and the growth-stage engine."""
