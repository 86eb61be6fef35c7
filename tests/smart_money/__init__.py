"""
Tests for the Smart Money module.

This package contains tests for:
- Wallet profiling
- Cohort signals, top performers and airdrop prediction
- Wallet correlation
- Record schemas and configuration
"""
