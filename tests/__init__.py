"""
Test suite for the CDDA track splitter.

This package contains:
- Unit tests for sector detection, the WAVE header codec, track files,
  settings and error helpers
- Integration tests for complete splitting runs and the command line
- Synthetic sector stream fixtures
"""
