"""
Retry Audit: exception classification and retry narration.

Turns declarative lists of exception type names into a retryable/non-retryable
classification table, and narrates every retry loop as a deterministic,
auditable sequence of log events:
- One warning per failed attempt
- One info line for the final disposition (fallback or success)

Architecture: classification table + limit policy + listener-driven executor
"""

__version__ = "0.1.0"
