"""Test suite for the on-chain activity engine."""
