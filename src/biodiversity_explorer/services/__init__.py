"""
Shared service utilities.

- http.py - requests session factory (default timeout, optional retry)
"""
