"""
counter_program.runtime — storage handle, invocation pipeline and in-memory host.

- AccountHandle        : the borrowed account capability (runtime.handle)
- process_instruction  : decode → authorize → apply → commit (runtime.processor)
- InMemoryHost         : host stand-in for tests and the CLI (runtime.host)
"""

from .handle import AccountHandle
from .host import InMemoryHost, InvocationResult, InvocationStatus
from .processor import commit, process_instruction

__all__ = [
    "AccountHandle",
    "commit",
    "process_instruction",
    "InMemoryHost",
    "InvocationResult",
    "InvocationStatus",
]
