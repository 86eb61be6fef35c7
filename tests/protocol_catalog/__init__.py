"""Tests for the protocol catalog."""
