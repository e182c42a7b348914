# RelayVault Test Suite
"""
Test suite including:
- Unit tests per module
- Integration tests (registry + envelopes)
- Security tests (tampering, wrong keys, invalid inputs)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
