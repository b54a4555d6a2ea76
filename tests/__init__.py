"""
Lending Risk Test Suite
=======================

Test organization:
- tests/unit/                 - Shared layers (config, logging, models, storage)
- tests/services/<service>/   - Scoring, fraud detection, data providers
                                and lending decisions

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Shared layers only
    pytest tests/services           # Service engines only
"""
