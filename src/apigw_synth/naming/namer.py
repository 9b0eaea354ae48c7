"""
apigw_synth.naming.namer

Stack-scoped resource naming.

Responsibilities:
- Prefix every identifier with the stack name.
- Carry the provider limits used by the gateway call sites as plain constants.
"""

from __future__ import annotations

from dataclasses import dataclass

from apigw_synth.naming.allocator import allocate_name

# Provider-imposed identifier limits.
SERVICE_ACCOUNT_ID_MAX = 28
GATEWAY_ID_MAX = 50
RESOURCE_NAME_MAX = 63
IAM_MEMBER_NAME_MAX = 100


@dataclass(frozen=True, slots=True)
class ResourceNamer:
    stack_name: str

    def name(self, service: str, kind: str = "", *, max_length: int = RESOURCE_NAME_MAX) -> str:
        """
        `{stack}-{service}-{kind}` shortened to `max_length`; the kind is dropped when empty.
        """

        segments = [self.stack_name, service]
        if kind:
            segments.append(kind)
        return allocate_name(segments, max_length)
