"""Request context for ownership enforcement."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's owner identity.

    The identity is trusted as already verified by the upstream auth provider.
    """

    owner_id: str
