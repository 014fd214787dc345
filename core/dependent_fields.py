# core/dependent_fields.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, MutableMapping, Optional, Sequence

import httpx

from clients.matrimony import MatrimonyAPIError
from core.options import Option, find_option, is_known_id, option_label, resolve_options

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class DependencyEdge:
    parent: str
    child: str
    fetcher: str  # key into the graph's fetcher map
    # Keep the child's old value as a name candidate for the new option list.
    carry_name: bool = False


DEFAULT_EDGES: tuple[DependencyEdge, ...] = (
    DependencyEdge(parent="religion_id", child="caste", fetcher="castes", carry_name=True),
    DependencyEdge(parent="country", child="state", fetcher="states"),
    DependencyEdge(parent="state", child="city", fetcher="cities"),
)


class DependentFieldGraph:
    """
    Keeps dependent pickers consistent with their parents.

    - Changing a parent clears the whole subtree below it and re-fetches the
      direct children for the new parent value.
    - Freshly loaded option lists reconcile held names to ids.
    - Each child carries a generation counter; a response that arrives after a
      newer fetch or clear of the same child is dropped.
    """

    def __init__(
        self,
        form: MutableMapping[str, Any],
        fetchers: Dict[str, Fetcher],
        edges: Sequence[DependencyEdge] = DEFAULT_EDGES,
    ):
        self.form = form
        self.fetchers = fetchers
        self.edges = tuple(edges)
        self.options: Dict[str, List[Option]] = {}
        self._generation: Dict[str, int] = {}

    # -----------------------
    # Graph queries
    # -----------------------
    def children_of(self, field: str) -> List[DependencyEdge]:
        return [e for e in self.edges if e.parent == field]

    def generation(self, field: str) -> int:
        return self._generation.get(field, 0)

    def _bump(self, field: str) -> int:
        self._generation[field] = self.generation(field) + 1
        return self._generation[field]

    # -----------------------
    # Mutations
    # -----------------------
    def apply_options(self, field: str, options: Sequence[Option]) -> None:
        """
        Store a freshly loaded option list and reconcile the held value:
        a name that matches an option (case-insensitive) becomes its id,
        anything else is left untouched.
        """
        self.options[field] = list(options)
        held = str(self.form.get(field) or "").strip()
        if not held or is_known_id(options, held):
            return
        match = find_option(options, held)
        if match:
            logger.debug("reconciled %s %r -> %r", field, held, match.id)
            self.form[field] = match.id

    def _clear_subtree(self, field: str) -> None:
        for edge in self.children_of(field):
            self._bump(edge.child)
            self.form[edge.child] = ""
            self.options[edge.child] = []
            self._clear_subtree(edge.child)

    async def set_value(self, field: str, value: Any) -> bool:
        """Returns False when the value did not change (no re-fetch)."""
        value = "" if value is None else str(value)
        if str(self.form.get(field) or "") == value:
            return False

        carried = {
            e.child: option_label(self.options.get(e.child, []), self.form.get(e.child))
            for e in self.children_of(field)
            if e.carry_name
        }
        self.form[field] = value
        self._clear_subtree(field)

        if value:
            for edge in self.children_of(field):
                await self.refresh(edge, carry=carried.get(edge.child))
        return True

    async def refresh(self, edge: DependencyEdge, carry: Optional[str] = None) -> List[Option]:
        """Fetch the child options of `edge` for the parent's current value."""
        parent_value = str(self.form.get(edge.parent) or "").strip()
        if not parent_value:
            self.options[edge.child] = []
            return []

        gen = self._bump(edge.child)
        fetcher = self.fetchers.get(edge.fetcher)
        if fetcher is None:
            logger.warning("no fetcher registered for %s", edge.fetcher)
            self.options[edge.child] = []
            return []

        try:
            raw = await fetcher(parent_value)
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("%s fetch for %s=%r failed: %s", edge.child, edge.parent, parent_value, e)
            if gen == self.generation(edge.child):
                self.options[edge.child] = []
            return []

        if gen != self.generation(edge.child):
            logger.debug("dropping stale %s options (gen %s, now %s)", edge.child, gen, self.generation(edge.child))
            return self.options.get(edge.child, [])

        options = resolve_options(raw)
        if carry and not str(self.form.get(edge.child) or "").strip():
            match = _match_name(options, carry)
            if match:
                self.form[edge.child] = match.id
        self.apply_options(edge.child, options)
        return options

    async def initialize(self) -> None:
        """Load children for every parent that already holds a value, top of the chain first."""
        for edge in self.edges:
            await self.refresh(edge)


def _match_name(options: Sequence[Option], name: str) -> Optional[Option]:
    low = (name or "").strip().casefold()
    if not low:
        return None
    return next((o for o in options if o.name.casefold() == low), None)
