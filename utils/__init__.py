"""
Shared helpers: text normalization and retry/backoff.
"""
