"""Helpers for Workers projects: settings checks, KV site uploads, routes, preview and dev proxy."""

__version__ = "0.1.0"