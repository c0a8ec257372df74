"""
AgVote Governance Engine

Lifecycle, ballot casting and official tallying for formal deliberative
assemblies where members cast weighted ballots on motions, possibly through
proxies.

Engine guarantees:
- An archived meeting never changes again
- A ballot is only recorded against a live meeting and an open motion
- Official results are idempotently recomputable from stored data
- Broadcast side channels never affect a primary outcome
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
