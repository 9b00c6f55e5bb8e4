"""Adapters: settings, logging, HTTP category store and local state persistence."""
