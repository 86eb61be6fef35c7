"""
Tests for the Activity Insights module.

This package contains tests for:
- Raw record validation
- Protocol interaction detection and activity snapshots
- Breakdown, timeline, monthly buckets and focus areas
- Summary metrics
- Engine orchestration and failure isolation
"""
