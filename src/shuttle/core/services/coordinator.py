"""Typed facade over the coordinator operations.

Commands talk to :class:`CoordinatorClient` only; which binding carries the
request (NATS or HTTP) is decided by whoever built the transport.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation
from shuttle.core.interfaces.transport import Transport


@dataclass(frozen=True)
class WorkSubmission:
    description: str
    boundary: str
    capability: str
    priority: int
    deadline: str | None = None
    agent_type: str | None = None
    task_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_payload(self) -> dict[str, Any]:
        return {
            "taskId": self.task_id,
            "description": self.description,
            "boundary": self.boundary,
            "capability": self.capability,
            "priority": self.priority,
            "deadline": self.deadline,
            "agentType": self.agent_type,
        }


class CoordinatorClient:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    async def _send(
        self,
        operation: Operation,
        payload: Mapping[str, Any] | None = None,
        entity_id: str | None = None,
    ) -> Envelope[Any]:
        return await self._transport.send(operation, payload, entity_id=entity_id)

    # Work
    async def submit_work(self, submission: WorkSubmission) -> Envelope[Any]:
        return await self._send(Operation.WORK_SUBMIT, submission.to_payload())

    async def list_work(self, *, status: str | None = None, boundary: str | None = None) -> Envelope[Any]:
        # The coordinator filters by boundary under the name "classification".
        return await self._send(Operation.WORK_LIST, {"status": status, "classification": boundary})

    async def get_work(self, work_id: str) -> Envelope[Any]:
        return await self._send(Operation.WORK_GET, entity_id=work_id)

    async def work_status(self, work_id: str) -> Envelope[Any]:
        return await self._send(Operation.WORK_STATUS, entity_id=work_id)

    async def cancel_work(self, work_id: str) -> Envelope[Any]:
        return await self._send(Operation.WORK_CANCEL, entity_id=work_id)

    # Agents
    async def list_agents(
        self,
        *,
        agent_type: str | None = None,
        status: str | None = None,
        capability: str | None = None,
    ) -> Envelope[Any]:
        return await self._send(
            Operation.AGENTS_LIST,
            {"type": agent_type, "status": status, "capability": capability},
        )

    async def get_agent(self, agent_guid: str) -> Envelope[Any]:
        return await self._send(Operation.AGENT_DETAILS, entity_id=agent_guid)

    async def shutdown_agent(
        self,
        agent_guid: str,
        *,
        graceful: bool = True,
        grace_period_ms: int | None = None,
    ) -> Envelope[Any]:
        return await self._send(
            Operation.AGENT_SHUTDOWN,
            {"agentGuid": agent_guid, "graceful": graceful, "gracePeriodMs": grace_period_ms},
            entity_id=agent_guid,
        )

    # Targets
    async def list_targets(
        self,
        *,
        agent_type: str | None = None,
        status: str | None = None,
        capability: str | None = None,
        include_disabled: bool = False,
    ) -> Envelope[Any]:
        return await self._send(
            Operation.TARGETS_LIST,
            {
                "type": agent_type,
                "status": status,
                "capability": capability,
                "includeDisabled": include_disabled or None,
            },
        )

    async def create_target(self, target: Mapping[str, Any]) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_REGISTER, target)

    async def get_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_GET, entity_id=target)

    async def update_target(self, target: str, updates: Mapping[str, Any]) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_UPDATE, updates, entity_id=target)

    async def delete_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_REMOVE, entity_id=target)

    async def test_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_TEST, entity_id=target)

    async def enable_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_ENABLE, entity_id=target)

    async def disable_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.TARGETS_DISABLE, entity_id=target)

    # Spin-up
    async def spin_up_target(self, target: str) -> Envelope[Any]:
        return await self._send(Operation.SPINUP_TRIGGER, {"targetId": target}, entity_id=target)

    async def spin_up_status(self, operation_id: str) -> Envelope[Any]:
        return await self._send(Operation.SPINUP_STATUS, entity_id=operation_id)

    async def list_spin_ups(self) -> Envelope[Any]:
        return await self._send(Operation.SPINUP_LIST)

    # Aggregates
    async def get_stats(self) -> Envelope[Any]:
        return await self._send(Operation.STATS)

    async def list_projects(self) -> Envelope[Any]:
        return await self._send(Operation.PROJECTS_LIST)
