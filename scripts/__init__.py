"""
Scripts Package.

Operational entry points for the engine.

Scripts:
- analyze_wallet: Run insights, eligibility and profiling over a wallet dump
"""
