"""
counter_program.cli
-------------------

Developer CLI for the counter program, exposed as the `counter-program`
console script (counter_program.cli.main:app).

This is local tooling only: it encodes/decodes wire buffers and simulates
invocations against an in-memory host. Nothing here talks to a network.
"""
