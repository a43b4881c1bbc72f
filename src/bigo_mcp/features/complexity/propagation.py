"""Complexity propagation through the call graph.

A function's reported time complexity is raised to the worst complexity
reachable through the functions it calls. The walk is a memoized DFS:
each name moves unvisited -> in progress -> done. Names still in progress
when a call reaches them form a call cycle; the walk collects each cycle as
one strongly connected component (Tarjan) and gives every member the worst
notation found anywhere in the component or among its callees, so the
result does not depend on which member is visited first.
"""

from enum import Enum
from typing import Dict, List, Optional

from bigo_mcp.constants import PropagationDefaults
from bigo_mcp.core.logging import get_logger
from bigo_mcp.models.complexity import (
    AnalysisEvent,
    CallHierarchy,
    EventSink,
    MethodAnalysis,
    Notation,
    TimeComplexity,
    worst_notation,
)

from .vocabulary import explain, rating_for

logger = get_logger("complexity.propagation")


class VisitState(Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


def log_event(event: AnalysisEvent) -> None:
    """Default event sink."""
    logger.debug("propagation_event", **event.to_dict())


class ComplexityPropagator:
    """Raises each method's time complexity to the worst of its callees."""

    def __init__(
        self,
        hierarchy: CallHierarchy,
        confidence_cap: int = PropagationDefaults.CONFIDENCE_CAP,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        self.hierarchy = hierarchy
        self.confidence_cap = confidence_cap
        self.event_sink = event_sink or log_event
        self.events: List[AnalysisEvent] = []
        self._own: Dict[str, Notation] = {}
        self._final: Dict[str, Notation] = {}
        self._state: Dict[str, VisitState] = {}
        self._order: Dict[str, int] = {}
        self._low: Dict[str, int] = {}
        self._stack: List[str] = []
        self._contributors: Dict[str, List[str]] = {}
        self._callee_worst: Dict[str, Notation] = {}

    def propagate(self, methods: List[MethodAnalysis]) -> List[AnalysisEvent]:
        """Update methods in place and return the decisions taken.

        Methods sharing a name are one vertex whose own complexity is the
        worst among them.
        """
        self.events = []
        self._own = {}
        for method in methods:
            current = self._own.get(method.name, Notation.CONSTANT)
            self._own[method.name] = worst_notation([current, method.time_complexity.notation])
        self._final = dict(self._own)
        self._state = {name: VisitState.UNVISITED for name in self._own}
        self._order = {}
        self._low = {}
        self._stack = []
        self._contributors = {}
        self._callee_worst = {}

        for method in methods:
            if self._state[method.name] is VisitState.UNVISITED:
                self._visit(method.name)
        for method in methods:
            self._apply(method)
        return self.events

    def _callees(self, name: str) -> List[str]:
        return [callee for callee in self.hierarchy.get(name, []) if callee in self._own and callee != name]

    def _visit(self, name: str) -> None:
        self._order[name] = self._low[name] = len(self._order)
        self._state[name] = VisitState.IN_PROGRESS
        self._stack.append(name)

        for callee in self._callees(name):
            state = self._state[callee]
            if state is VisitState.UNVISITED:
                self._visit(callee)
                self._low[name] = min(self._low[name], self._low[callee])
            elif state is VisitState.IN_PROGRESS:
                self._emit(AnalysisEvent(
                    kind="cycle_detected",
                    function_name=callee,
                    own_notation=self._own[callee],
                    final_notation=self._final[callee],
                    detail=f"Call cycle through {name} -> {callee}",
                ))
                self._low[name] = min(self._low[name], self._order[callee])

        if self._low[name] == self._order[name]:
            component = []
            while True:
                member = self._stack.pop()
                component.append(member)
                if member == name:
                    break
            self._resolve_component(list(reversed(component)))

    def _resolve_component(self, component: List[str]) -> None:
        # Callees outside the component are already done.
        members = set(component)
        final = worst_notation(
            [self._own[member] for member in component]
            + [self._final[callee] for member in component for callee in self._callees(member) if callee not in members]
        )
        for member in component:
            self._final[member] = final
            self._state[member] = VisitState.DONE
        for member in component:
            self._record(member)

    def _record(self, name: str) -> None:
        resolved = {callee: self._final[callee] for callee in self._callees(name)}
        own = self._own[name]
        final = self._final[name]
        callee_worst = worst_notation(resolved.values())
        self._callee_worst[name] = callee_worst
        self._contributors[name] = [
            f"{callee}({notation})" for callee, notation in resolved.items() if notation == callee_worst
        ]

        if final.rank > own.rank:
            self._emit(AnalysisEvent(
                kind="complexity_raised",
                function_name=name,
                own_notation=own,
                final_notation=final,
                callee=next(callee for callee, notation in resolved.items() if notation == final),
                detail=", ".join(self._contributors[name]),
            ))
        elif resolved:
            self._emit(AnalysisEvent(
                kind="complexity_unchanged",
                function_name=name,
                own_notation=own,
                final_notation=final,
            ))

    def _apply(self, method: MethodAnalysis) -> None:
        final = self._callee_worst.get(method.name, Notation.CONSTANT)
        current = method.time_complexity
        if final.rank <= current.notation.rank:
            return
        calls = ", ".join(self._contributors.get(method.name, []))
        method.time_complexity = TimeComplexity(
            notation=final,
            confidence=min(current.confidence, self.confidence_cap),
            description=f"{current.description}; Calls functions with complexities: {calls}",
            rating=rating_for(final),
        )
        method.explanation = explain(
            final, method.space_complexity.notation, f"{current.description}; includes function calls: {calls}"
        )

    def _emit(self, event: AnalysisEvent) -> None:
        self.events.append(event)
        self.event_sink(event)
