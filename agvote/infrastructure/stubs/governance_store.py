"""Shared in-memory storage backing every governance stub.

The stubs are separate adapters, one per port, but they must observe each
other's writes the way repositories sharing one database do. They all
read and write this store. It is NOT suitable for production use.
"""

from __future__ import annotations

import asyncio

from agvote.domain.models.attendance import Attendance
from agvote.domain.models.ballot import Ballot
from agvote.domain.models.meeting import Meeting
from agvote.domain.models.member import Member
from agvote.domain.models.motion import Motion
from agvote.domain.models.policy import QuorumPolicy, VotePolicy
from agvote.domain.models.proxy import ProxyDelegation


class InMemoryGovernanceStore:
    """Tables of the governance engine, keyed like their database rows.

    Attributes:
        meetings: meeting_id -> Meeting
        motions: motion_id -> Motion
        members: member_id -> Member
        attendances: (meeting_id, member_id) -> Attendance
        proxies: list of every delegation, active or revoked
        ballots: (motion_id, member_id) -> Ballot
        vote_policies: policy_id -> VotePolicy
        quorum_policies: policy_id -> QuorumPolicy
        presidents: (meeting_id, tenant_id) -> member_id
    """

    def __init__(self) -> None:
        """Initialize the store with empty tables."""
        self.meetings: dict[str, Meeting] = {}
        self.motions: dict[str, Motion] = {}
        self.members: dict[str, Member] = {}
        self.attendances: dict[tuple[str, str], Attendance] = {}
        self.proxies: list[ProxyDelegation] = []
        self.ballots: dict[tuple[str, str], Ballot] = {}
        self.vote_policies: dict[str, VotePolicy] = {}
        self.quorum_policies: dict[str, QuorumPolicy] = {}
        self.presidents: dict[tuple[str, str], str] = {}
        self._row_locks: dict[str, asyncio.Lock] = {}

    def row_lock(self, meeting_id: str) -> asyncio.Lock:
        """Get the row lock of a meeting, creating it on first use."""
        lock = self._row_locks.get(meeting_id)
        if lock is None:
            lock = asyncio.Lock()
            self._row_locks[meeting_id] = lock
        return lock

    # Seeding helpers

    def add_meeting(self, meeting: Meeting) -> Meeting:
        self.meetings[meeting.id] = meeting
        return meeting

    def add_motion(self, motion: Motion) -> Motion:
        self.motions[motion.id] = motion
        return motion

    def add_member(self, member: Member) -> Member:
        self.members[member.id] = member
        return member

    def add_vote_policy(self, policy: VotePolicy) -> VotePolicy:
        if policy.id is None:
            raise ValueError("Stored vote policies need an id")
        self.vote_policies[policy.id] = policy
        return policy

    def add_quorum_policy(self, policy: QuorumPolicy) -> QuorumPolicy:
        self.quorum_policies[policy.id] = policy
        return policy

    def assign_president(self, meeting_id: str, tenant_id: str, member_id: str) -> None:
        self.presidents[(meeting_id, tenant_id)] = member_id

    def clear(self) -> None:
        """Clear all stored data (for testing)."""
        self.meetings.clear()
        self.motions.clear()
        self.members.clear()
        self.attendances.clear()
        self.proxies.clear()
        self.ballots.clear()
        self.vote_policies.clear()
        self.quorum_policies.clear()
        self.presidents.clear()
        self._row_locks.clear()
