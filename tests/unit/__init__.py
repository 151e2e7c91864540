"""
tests.unit
==========

Example-based tests for the codec, engine, authorization, runtime, host,
config, logging and CLI layers. Shared fixtures live in tests/conftest.py.
"""
