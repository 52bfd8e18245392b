"""Clipboard agent that folds full-width characters and applies text substitutions."""

__version__ = "0.1.0"
