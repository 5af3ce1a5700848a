"""Provider registry.

A provider is one command the build tool can run, addressed by
``(namespace, name)``. Providers declare the build stages they depend on;
running those stages first is the host's job, the registry only records
them.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Tuple

from .errors import ProviderError

if TYPE_CHECKING:
    from .state import BuildState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provider:
    """A registered command.

    Attributes:
        name: Command name (e.g. "compile")
        namespace: Namespace the command lives under (e.g. "lfe")
        run: Callable that executes the command against a BuildState
        deps: (namespace, name) pairs of stages that must run first
        bare: True if the command is run directly rather than as a hook
        example: Example command line
        short_desc: One-line description
        desc: Long description
        opts: Command-specific options (none for bare compile providers)
    """

    name: str
    namespace: str
    run: Callable[["BuildState"], Any]
    deps: Tuple[Tuple[str, str], ...] = ()
    bare: bool = True
    example: str = ""
    short_desc: str = ""
    desc: str = ""
    opts: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.namespace, self.name)


class ProviderRegistry:
    """Holds providers keyed by (namespace, name)."""

    def __init__(self) -> None:
        self._providers: Dict[Tuple[str, str], Provider] = {}

    def add_provider(self, provider: Provider) -> None:
        """Register a provider.

        Raises:
            ProviderError: If a provider with the same key is registered
        """
        if provider.key in self._providers:
            raise ProviderError(f"Provider {provider.namespace} {provider.name} is already registered")
        self._providers[provider.key] = provider
        logger.debug(f"Registered provider {provider.namespace} {provider.name}")

    def get(self, namespace: str, name: str) -> Provider:
        """Look up a provider.

        Raises:
            ProviderError: If no such provider exists
        """
        try:
            return self._providers[(namespace, name)]
        except KeyError:
            raise ProviderError(f"Unknown command: {namespace} {name}") from None

    def providers(self, namespace: str = "") -> List[Provider]:
        """All providers, optionally limited to one namespace."""
        return [p for p in self._providers.values() if not namespace or p.namespace == namespace]

    def __contains__(self, key: object) -> bool:
        return key in self._providers

    def __len__(self) -> int:
        return len(self._providers)
