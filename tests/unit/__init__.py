"""
Unit tests for Retry Audit.

Test individual components in isolation:
- Type registry (builtin names, custom registration, import fallback)
- Classifier (overwrite order, empty inputs, configuration errors)
- Limit policy and backoff
- Narrator (disposition table, message wording, structured fields)
- Executor (attempt counting, waits, fallback, RetryExhausted)
- Settings and logging configuration
"""
