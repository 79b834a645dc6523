from shuttle.core.services.coordinator import CoordinatorClient, WorkSubmission

__all__ = ["CoordinatorClient", "WorkSubmission"]
