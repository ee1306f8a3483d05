"""Pygame desktop shell."""
