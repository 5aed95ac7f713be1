"""Application layer - Cycle diagnostics for exhausted resolution runs."""

from typing import Dict, List, Optional, Sequence, Type

from lattice_di.domain import CircularDependencyError, ResolutionSlot, ServiceDescriptor, is_assignable


class ResolutionStack:
    """Stack of types on the current walk.

    When a type appears twice in the stack, a circular dependency is detected.
    """

    def __init__(self) -> None:
        self._stack: List[Type] = []

    def push(self, dependency_type: Type) -> None:
        """Add a type to the stack.

        Raises:
            CircularDependencyError: If the type is already in the stack.
        """
        if dependency_type in self._stack:
            cycle_start_index = self._stack.index(dependency_type)
            cycle = self._stack[cycle_start_index:] + [dependency_type]
            raise CircularDependencyError(cycle)
        self._stack.append(dependency_type)

    def pop(self) -> None:
        if self._stack:
            self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()


class CycleDiagnoser:
    """Looks for a dependency cycle among slots left in the resolution queue.

    Only used to enrich a ``ResolutionExhaustedError``: the bounded requeue loop
    cannot tell a cycle from a chain that is merely deeper than the bound.

    Example:
        >>> CycleDiagnoser().find_cycle(pending_slots)
        [ServiceA, ServiceB, ServiceA]
    """

    def find_cycle(self, slots: Sequence[ResolutionSlot]) -> Optional[List[Type]]:
        """Return the first cycle found among ``slots``, closed by its first type.

        Args:
            slots: Unresolved slots still in the queue.

        Returns:
            Types forming a cycle, or None if the pending graph is acyclic.
        """
        edges = self._build_edges(slots)
        done: set = set()
        stack = ResolutionStack()

        for slot in slots:
            try:
                self._visit(slot.descriptor.service_type, edges, stack, done)
            except CircularDependencyError as e:
                return e.dependency_chain
            stack.clear()
        return None

    def _visit(self, node: Type, edges: Dict[Type, List[Type]], stack: ResolutionStack, done: set) -> None:
        if node in done:
            return
        stack.push(node)
        for target in edges.get(node, []):
            self._visit(target, edges, stack, done)
        stack.pop()
        done.add(node)

    def _build_edges(self, slots: Sequence[ResolutionSlot]) -> Dict[Type, List[Type]]:
        edges: Dict[Type, List[Type]] = {}
        for slot in slots:
            targets = edges.setdefault(slot.descriptor.service_type, [])
            for dependency_type in slot.open_dependencies():
                for candidate in slots:
                    if self._can_provide(candidate.descriptor, dependency_type):
                        provider = candidate.descriptor.service_type
                        if provider not in targets:
                            targets.append(provider)
        return edges

    @staticmethod
    def _can_provide(descriptor: ServiceDescriptor, dependency_type: Type) -> bool:
        if descriptor.provides(dependency_type):
            return True
        return any(is_assignable(dependency_type, spec.return_type) for spec in descriptor.producers)
