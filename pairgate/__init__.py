"""PairGate — consent-gated coordination engine for couple accounts.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
