"""Integration tests for postcheck.

These tests run the complete suite against an in-process fake
json-server-auth backend (see tests/conftest.py).

Test Structure:
- test_suite_run.py: setup, every scenario, and failure detection
- test_cli.py: the postcheck command line through Typer's CliRunner
"""
