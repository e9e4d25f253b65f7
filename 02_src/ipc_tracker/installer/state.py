"""Installation bookkeeping shared by every install entry point."""


class InstallationState:
    """Which contexts have been instrumented, and whether the bus is wrapped."""

    def __init__(self) -> None:
        self._contexts: set[str] = set()
        self.interception_installed = False

    def is_installed(self, context_id: str) -> bool:
        return context_id in self._contexts

    def mark_installed(self, context_id: str) -> None:
        self._contexts.add(context_id)

    @property
    def installed_contexts(self) -> frozenset[str]:
        return frozenset(self._contexts)

    def reset(self) -> None:
        self._contexts.clear()
        self.interception_installed = False
