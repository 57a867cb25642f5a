"""Unit tests for the CDDA track splitter."""
