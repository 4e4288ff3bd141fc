"""
Tests Package - Unit and Integration Tests

Test structure:
- tests/conftest.py - Shared fixtures (settings, store, app, client)
- tests/test_*.py - Store, exporter, broadcast channel, logging and API tests

Each test gets its own SQLite file under pytest's tmp_path.
"""
