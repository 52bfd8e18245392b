"""Normalizer, config, watcher and clipboard components."""
