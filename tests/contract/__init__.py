"""Contract tests against a live json-server-auth API.

These tests issue real HTTP requests and are skipped unless
POSTCHECK_LIVE=1 is set. The target is resolved the same way the CLI
resolves it (POSTCHECK_BASE_URL, POSTCHECK_TIMEOUT, ...).

Test files:
- test_posts_contract.py: one pytest test per contract scenario, sharing
  a single registered account for the whole session

Setup failure (registration or login) stops the pytest session instead
of failing every scenario individually.
"""
