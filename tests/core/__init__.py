"""Tests for the engine clock and numeric guards."""
