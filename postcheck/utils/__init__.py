"""Utility modules for postcheck.

This package contains the expectation helpers used by the scenarios and
the factory that builds clients for CLI commands.
"""
