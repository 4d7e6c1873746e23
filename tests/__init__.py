"""
Tests for gamemind
==================

Run all tests:
    pytest tests/

Skip the slower convergence tests:
    pytest tests/ -m "not slow"
"""
