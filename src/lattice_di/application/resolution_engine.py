import logging
from collections import deque
from typing import Deque, Iterable, List, Type

from lattice_di.application.cycle_diagnoser import CycleDiagnoser
from lattice_di.domain import (
    DescriptorKind,
    IInstantiationService,
    InstantiationConfig,
    IResolutionEngine,
    ProducerDescriptor,
    ResolutionExhaustedError,
    ResolutionSlot,
    ServiceDescriptor,
    UnsatisfiedDependencyError,
    is_assignable,
)

logger = logging.getLogger(__name__)


class ResolutionEngine(IResolutionEngine):
    """Builds an unordered set of descriptors with a requeue loop.

    Each descriptor waits in a queue until every constructor parameter has been
    filled by an already-built instance. Built instances are broadcast to every
    waiting slot that needs them. A descriptor's producers are built right after
    it and never enter the queue.

    The loop is bounded by ``InstantiationConfig.max_iterations`` total requeues.
    This is a coarse stand-in for cycle detection: a cycle and a chain deeper
    than the bound fail the same way.

    Attributes:
        _config: Loop settings.
        _instantiation_service: Builds the instances.
        _cycle_diagnoser: Explains exhausted runs.
    """

    def __init__(self, config: InstantiationConfig, instantiation_service: IInstantiationService) -> None:
        self._config = config
        self._instantiation_service = instantiation_service
        self._cycle_diagnoser = CycleDiagnoser()
        self._queue: Deque[ResolutionSlot] = deque()
        self._available_types: List[Type] = []
        self._built: List[ServiceDescriptor] = []

    def instantiate_all(self, descriptors: Iterable[ServiceDescriptor]) -> List[ServiceDescriptor]:
        """Resolve and build every descriptor and its producers.

        Args:
            descriptors: Service descriptors, deduplicated by type. Order only
                seeds the queue; any order resolves.

        Returns:
            Built descriptors, services and producers interleaved in construction order.

        Raises:
            ValueError: If a producer descriptor is passed in.
            UnsatisfiedDependencyError: If a required type has no candidate.
            ResolutionExhaustedError: If the iteration bound is crossed.
            ConstructionError: If building an instance fails.

        Example:
            >>> engine = ResolutionEngine(InstantiationConfig(), InstantiationService())
            >>> built = engine.instantiate_all([top, leaf, mid])
            >>> [d.service_type for d in built]
            [Leaf, Mid, Top]
        """
        descriptors = list(descriptors)
        self._reset(descriptors)
        self._check_for_missing_services(descriptors)

        max_iterations = self._config.max_iterations
        counter = 0
        while self._queue:
            if counter > max_iterations:
                pending = [slot.descriptor.service_type for slot in self._queue]
                cycle = self._cycle_diagnoser.find_cycle(list(self._queue))
                logger.warning("Resolution exhausted after %d requeues; %d services pending", counter, len(pending))
                raise ResolutionExhaustedError(max_iterations, pending, cycle)

            slot = self._queue.popleft()
            if slot.is_resolved:
                descriptor = slot.descriptor
                self._instantiation_service.create_instance(descriptor, *slot.arguments())
                self._register_instantiated(descriptor)
                self._register_producers(descriptor)
            else:
                self._queue.append(slot)
                counter += 1

        logger.debug("Resolved %d descriptors after %d requeues", len(self._built), counter)
        return list(self._built)

    def _reset(self, descriptors: List[ServiceDescriptor]) -> None:
        self._queue.clear()
        self._available_types.clear()
        self._built = []
        for descriptor in descriptors:
            if descriptor.kind is DescriptorKind.PRODUCER:
                raise ValueError(
                    f"Producer descriptor for {descriptor.service_type.__name__} cannot be resolved directly"
                )
            self._queue.append(ResolutionSlot.for_descriptor(descriptor))
            self._available_types.append(descriptor.service_type)
            self._available_types.extend(spec.return_type for spec in descriptor.producers)

    def _is_assignable_type_present(self, dependency_type: Type) -> bool:
        return any(is_assignable(dependency_type, available) for available in self._available_types)

    def _check_for_missing_services(self, descriptors: List[ServiceDescriptor]) -> None:
        for descriptor in descriptors:
            for dependency_type in descriptor.dependencies:
                if not self._is_assignable_type_present(dependency_type):
                    raise UnsatisfiedDependencyError(dependency_type, descriptor.service_type)

    def _register_producers(self, owner: ServiceDescriptor) -> None:
        for spec in owner.producers:
            producer_descriptor = ProducerDescriptor.from_spec(spec, owner)
            self._instantiation_service.create_producer_instance(producer_descriptor)
            self._register_instantiated(producer_descriptor)

    def _register_instantiated(self, descriptor: ServiceDescriptor) -> None:
        if descriptor.kind is DescriptorKind.SERVICE:
            self._update_dependents(descriptor)
        self._built.append(descriptor)

        for slot in self._queue:
            if slot.accept(descriptor.instance, descriptor.service_type):
                logger.debug(
                    "%s received %s",
                    slot.descriptor.service_type.__name__,
                    descriptor.service_type.__name__,
                )

    def _update_dependents(self, new_descriptor: ServiceDescriptor) -> None:
        """Record ``new_descriptor`` as a dependent of every built provider it needed.

        Edges point from provider to later-built consumer and are only recorded
        at the consumer's construction time.
        """
        for provider in self._built:
            if any(provider.provides(dependency_type) for dependency_type in new_descriptor.dependencies):
                provider.add_dependent(new_descriptor)
