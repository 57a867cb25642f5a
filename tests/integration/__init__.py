"""Integration tests for complete splitting runs."""
