"""
apigw_synth.naming

Identifier allocation for generated cloud resources.

Responsibilities:
- Length-bounded, deterministic name allocation from name fragments.
- A stack-scoped helper used by every call site that needs a provider-legal id.
"""

from apigw_synth.naming.allocator import NameAllocationError, allocate_name
from apigw_synth.naming.namer import ResourceNamer

__all__ = ["NameAllocationError", "ResourceNamer", "allocate_name"]
