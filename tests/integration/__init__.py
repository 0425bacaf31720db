"""
Integration tests for Retry Audit.

Test the full stack wired from Settings:
- Settings -> classification table -> policy -> executor + narrator
- Exact log narrative for every loop outcome (sync and async)
"""
