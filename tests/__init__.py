"""Test suites for counter_program (unit + property)."""
