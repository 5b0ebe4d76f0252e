"""
Test Suite for Asset River.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Service tests over the full repository stack

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/asset_river            # With coverage
"""
