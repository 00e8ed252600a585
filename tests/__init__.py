# shopadmin Test Suite
#
# This package contains:
# - Store tests against an in-process fake backend (pytest + httpx + Flask)
# - Unit tests for pricing, envelopes, payload shaping and storage
# - CLI tests (click CliRunner)
#
# Run with: python -m tests.run [smoke|full|unit|cli|all]
