"""
Tests for the Eligibility module.

This package contains tests for:
- Legacy check string parsing
- Criterion dispatch and custom handlers
- Project scoring
- Project schemas and loading
"""
