"""Prompting package.

Contains deterministic prompt-construction helpers. It does not perform
validation or model invocation.
"""
