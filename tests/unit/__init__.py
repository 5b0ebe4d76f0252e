"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked dependencies.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_valuation_engine.py: Depreciation and event decay
    - test_cash_flow.py: Monthly income vs. depreciation
    - test_asset_validator.py / test_document_parser.py: Input checks
    - test_*_repository.py: Repository tiers and wrappers
    - test_config_loader.py: Configuration loading/validation
"""
