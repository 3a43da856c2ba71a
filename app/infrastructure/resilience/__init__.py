"""Resilience infrastructure: the retry lifecycle engine.

See infrastructure.resilience.retry.
"""
