"""The ambient context every contributor is invoked with.

The context carries a workspace identity and a scoped key-value preference
store. Contributors read it; the engines only pass it through and hand it
to run predicates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

# Scope used for preferences that apply to the whole delivery machine
SDM_SCOPE = "sdm"


@runtime_checkable
class PreferenceStore(Protocol):
    async def get(self, key: str, scope: Optional[str] = None, default: Any = None) -> Any: ...

    async def put(self, key: str, value: Any, scope: Optional[str] = None) -> None: ...


class InMemoryPreferenceStore:
    """Preference store held in a dict keyed by (scope, key)."""

    def __init__(self, values: Optional[dict[tuple[Optional[str], str], Any]] = None):
        self._values: dict[tuple[Optional[str], str], Any] = dict(values or {})

    async def get(self, key: str, scope: Optional[str] = None, default: Any = None) -> Any:
        return self._values.get((scope, key), default)

    async def put(self, key: str, value: Any, scope: Optional[str] = None) -> None:
        self._values[(scope, key)] = value


@runtime_checkable
class SdmContext(Protocol):
    workspace_id: str
    preferences: PreferenceStore


@dataclass
class AnalysisContext:
    """Plain SdmContext implementation."""

    workspace_id: str = "local"
    preferences: PreferenceStore = field(default_factory=InMemoryPreferenceStore)
