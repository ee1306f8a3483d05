"""Bounded undo/redo log of planting actions."""
