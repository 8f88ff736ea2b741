"""Sinks for collected CPU load samples."""
