"""Parent/child relationship bookkeeping between agents."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Bidirectional multimap of supervisor -> worker edges.

    Instances are passed explicitly to the components that need them; there
    is no process-wide singleton. All operations are idempotent.

    Example::

        registry = AgentRegistry()
        registry.register_sub_agent("supervisor", "researcher")
        registry.get_parent_agent_ids("researcher")  # ["supervisor"]
    """

    def __init__(self) -> None:
        self._parents: dict[str, list[str]] = {}
        self._children: dict[str, list[str]] = {}

    def register_sub_agent(self, parent_id: str, child_id: str) -> None:
        """Record that ``child_id`` works for ``parent_id``.

        Registering an existing edge is a no-op.
        """
        parents = self._parents.setdefault(child_id, [])
        if parent_id not in parents:
            parents.append(parent_id)
        children = self._children.setdefault(parent_id, [])
        if child_id not in children:
            children.append(child_id)
        logger.debug("Registered sub-agent edge %s -> %s", parent_id, child_id)

    def unregister_sub_agent(self, parent_id: str, child_id: str) -> None:
        """Drop the edge between ``parent_id`` and ``child_id`` if present."""
        _discard(self._parents, child_id, parent_id)
        _discard(self._children, parent_id, child_id)
        logger.debug("Unregistered sub-agent edge %s -> %s", parent_id, child_id)

    def get_parent_agent_ids(self, child_id: str) -> list[str]:
        """Return the ids of every agent ``child_id`` is registered under."""
        return list(self._parents.get(child_id, []))

    def get_sub_agent_ids(self, parent_id: str) -> list[str]:
        """Return the ids of every worker registered under ``parent_id``."""
        return list(self._children.get(parent_id, []))

    def clear_agent_relationships(self, agent_id: str) -> None:
        """Remove every edge in which ``agent_id`` takes part."""
        for parent_id in self.get_parent_agent_ids(agent_id):
            self.unregister_sub_agent(parent_id, agent_id)
        for child_id in self.get_sub_agent_ids(agent_id):
            self.unregister_sub_agent(agent_id, child_id)

    def __len__(self) -> int:
        """Return the number of registered edges."""
        return sum(len(parents) for parents in self._parents.values())

    def __repr__(self) -> str:
        return f"AgentRegistry(edges={len(self)})"


def _discard(mapping: dict[str, list[str]], key: str, value: str) -> None:
    values = mapping.get(key)
    if values is None:
        return
    if value in values:
        values.remove(value)
    if not values:
        del mapping[key]
