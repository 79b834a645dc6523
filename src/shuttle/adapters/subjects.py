"""NATS subject hierarchy for the Weft coordinator.

Shape: ``weft.<project>.<category>.<verb>[.<id>]``. Subjects are only ever
built and compared (routing matches them byte for byte), never parsed.
"""

from __future__ import annotations

import re

from shuttle.core.domain.operations import Operation, SubjectCategory

SUBJECT_ROOT = "weft"

# NATS wildcards and the token separator would let two inputs collide.
_INVALID_TOKEN = re.compile(r"[.*>\s]")


def _token(value: str, what: str) -> str:
    if not value or _INVALID_TOKEN.search(value):
        raise ValueError(f"Invalid {what} for a NATS subject: {value!r}")
    return value


class SubjectNamer:
    """Builds subjects for one project."""

    def __init__(self, project_id: str) -> None:
        self._project_id = _token(project_id, "project id")

    @property
    def project_id(self) -> str:
        return self._project_id

    def subject(
        self,
        category: SubjectCategory | str,
        verb: str | None = None,
        entity_id: str | None = None,
    ) -> str:
        category = SubjectCategory(category)
        parts = [SUBJECT_ROOT, self._project_id, category.value]
        if verb is not None:
            parts.append(_token(verb, "operation"))
        if entity_id is not None:
            parts.append(_token(entity_id, "entity id"))
        return ".".join(parts)

    def for_operation(self, operation: Operation, entity_id: str | None = None) -> str:
        route = operation.route
        if route.category is None:
            raise ValueError(f"{operation.value} is not available over NATS")
        if route.id_in_subject:
            if entity_id is None:
                raise ValueError(f"{operation.value} needs an entity id")
            return self.subject(route.category, route.verb, entity_id)
        return self.subject(route.category, route.verb)

    # Work
    def work_submit(self) -> str:
        return self.subject(SubjectCategory.WORK, "submit")

    def work_status(self, work_item_id: str) -> str:
        return self.subject(SubjectCategory.WORK, "status", work_item_id)

    def work_list(self) -> str:
        return self.subject(SubjectCategory.WORK, "list")

    def work_get(self) -> str:
        return self.subject(SubjectCategory.WORK, "get")

    def work_cancel(self) -> str:
        return self.subject(SubjectCategory.WORK, "cancel")

    # Agents
    def agents_list(self) -> str:
        return self.subject(SubjectCategory.AGENTS, "list")

    def agent_details(self, agent_guid: str) -> str:
        return self.subject(SubjectCategory.AGENTS, entity_id=agent_guid)

    def agent_shutdown(self) -> str:
        return self.subject(SubjectCategory.AGENTS, "shutdown")

    # Targets
    def targets_list(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "list")

    def targets_register(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "register")

    def targets_get(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "get")

    def targets_update(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "update")

    def targets_remove(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "remove")

    def targets_test(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "test")

    def targets_enable(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "enable")

    def targets_disable(self) -> str:
        return self.subject(SubjectCategory.TARGETS, "disable")

    # Spin-up
    def spin_up_trigger(self) -> str:
        return self.subject(SubjectCategory.SPINUP, "trigger")

    def spin_up_status(self) -> str:
        return self.subject(SubjectCategory.SPINUP, "status")

    def spin_up_list(self) -> str:
        return self.subject(SubjectCategory.SPINUP, "list")

    # Stats
    def stats(self) -> str:
        return self.subject(SubjectCategory.STATS)
