"""
Integration Tests - PortfolioService over the Full Stack.

These tests verify that all components work together correctly.
A switchable in-memory store stands in for the remote API so outages
can be simulated without external dependencies.

Test Files:
    - test_portfolio_service.py: Valuations, writes, import/export, outages
"""
