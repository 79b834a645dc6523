"""Remote operations understood by the Weft coordinator.

Each :class:`Operation` carries two addresses:

- a subject category/verb for the NATS request/reply binding;
- an HTTP method and path template for the REST binding.

``{id}`` in a path template is filled with the entity id of the call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SubjectCategory(str, Enum):
    WORK = "work"
    AGENTS = "agents"
    TARGETS = "targets"
    SPINUP = "spinup"
    STATS = "stats"


@dataclass(frozen=True)
class Route:
    category: SubjectCategory | None
    verb: str | None
    method: str
    path: str
    id_in_subject: bool = False
    timeout: float | None = None

    @property
    def needs_id(self) -> bool:
        return "{id}" in self.path


class Operation(str, Enum):
    WORK_SUBMIT = "work.submit"
    WORK_STATUS = "work.status"
    WORK_LIST = "work.list"
    WORK_GET = "work.get"
    WORK_CANCEL = "work.cancel"

    AGENTS_LIST = "agents.list"
    AGENT_DETAILS = "agents.details"
    AGENT_SHUTDOWN = "agents.shutdown"

    TARGETS_LIST = "targets.list"
    TARGETS_REGISTER = "targets.register"
    TARGETS_GET = "targets.get"
    TARGETS_UPDATE = "targets.update"
    TARGETS_REMOVE = "targets.remove"
    TARGETS_TEST = "targets.test"
    TARGETS_ENABLE = "targets.enable"
    TARGETS_DISABLE = "targets.disable"

    SPINUP_TRIGGER = "spinup.trigger"
    SPINUP_STATUS = "spinup.status"
    SPINUP_LIST = "spinup.list"

    STATS = "stats"
    PROJECTS_LIST = "projects.list"

    @property
    def route(self) -> Route:
        return ROUTES[self]


_W = SubjectCategory.WORK
_A = SubjectCategory.AGENTS
_T = SubjectCategory.TARGETS
_S = SubjectCategory.SPINUP

ROUTES: dict[Operation, Route] = {
    Operation.WORK_SUBMIT: Route(_W, "submit", "POST", "/api/work"),
    Operation.WORK_STATUS: Route(_W, "status", "GET", "/api/work/{id}/status", id_in_subject=True),
    Operation.WORK_LIST: Route(_W, "list", "GET", "/api/work"),
    Operation.WORK_GET: Route(_W, "get", "GET", "/api/work/{id}"),
    Operation.WORK_CANCEL: Route(_W, "cancel", "POST", "/api/work/{id}/cancel"),
    # agents.<guid> has no verb token.
    Operation.AGENTS_LIST: Route(_A, "list", "GET", "/api/agents"),
    Operation.AGENT_DETAILS: Route(_A, None, "GET", "/api/agents/{id}", id_in_subject=True),
    Operation.AGENT_SHUTDOWN: Route(_A, "shutdown", "POST", "/api/agents/{id}/shutdown"),
    Operation.TARGETS_LIST: Route(_T, "list", "GET", "/api/targets"),
    Operation.TARGETS_REGISTER: Route(_T, "register", "POST", "/api/targets"),
    Operation.TARGETS_GET: Route(_T, "get", "GET", "/api/targets/{id}"),
    Operation.TARGETS_UPDATE: Route(_T, "update", "PATCH", "/api/targets/{id}"),
    Operation.TARGETS_REMOVE: Route(_T, "remove", "DELETE", "/api/targets/{id}"),
    Operation.TARGETS_TEST: Route(_T, "test", "POST", "/api/targets/{id}/test"),
    Operation.TARGETS_ENABLE: Route(_T, "enable", "POST", "/api/targets/{id}/enable"),
    Operation.TARGETS_DISABLE: Route(_T, "disable", "POST", "/api/targets/{id}/disable"),
    Operation.SPINUP_TRIGGER: Route(_S, "trigger", "POST", "/api/targets/{id}/spin-up"),
    Operation.SPINUP_STATUS: Route(_S, "status", "GET", "/api/spin-up/{id}"),
    Operation.SPINUP_LIST: Route(_S, "list", "GET", "/api/spin-up"),
    Operation.STATS: Route(SubjectCategory.STATS, None, "GET", "/api/stats", timeout=5.0),
    # Cross-project listing only exists on the REST API.
    Operation.PROJECTS_LIST: Route(None, None, "GET", "/api/projects"),
}
