import inspect
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Type, get_type_hints

from lattice_di.domain import MappingError, MarkerConfig, ProducerSpec, ServiceDescriptor
from lattice_di.domain.markers import (
    AUTOWIRED_ATTR,
    POST_CONSTRUCT_ATTR,
    PRE_DESTROY_ATTR,
    PRODUCER_MARKER_ATTR,
    SERVICE_MARKER_ATTR,
    has_flag,
    unwrap_function,
)

logger = logging.getLogger(__name__)


def declared_members(cls: Type) -> Iterator[Tuple[str, Any]]:
    """Yield ``(name, member)`` pairs along the MRO, most derived first.

    Overridden names are yielded once, from the class that overrides them.
    """
    seen = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            yield name, member


class ServiceMapper:
    """Turns marked classes into service descriptors.

    Uses constructor introspection and type hints to find dependencies, and
    the marker decorators to find hooks and producer methods.

    Attributes:
        _config: Markers recognized as service and producer.
    """

    def __init__(self, config: Optional[MarkerConfig] = None) -> None:
        self._config = config or MarkerConfig()

    def map_services(self, classes: Iterable[Type]) -> List[ServiceDescriptor]:
        """Map every class carrying a recognized service marker.

        Args:
            classes: Candidate classes. Duplicates are dropped, first occurrence wins.

        Returns:
            One descriptor per service class, in input order.

        Raises:
            MappingError: If a class has an invalid constructor, hook or producer.

        Example:
            >>> descriptors = ServiceMapper().map_services([Repository, UserService, Helper])
        """
        unique: Dict[int, Type] = {}
        for cls in classes:
            unique.setdefault(id(cls), cls)

        descriptors = []
        for cls in unique.values():
            marker = vars(cls).get(SERVICE_MARKER_ATTR)
            if marker is None or marker not in self._config.service_markers:
                continue
            descriptors.append(self.map_service(cls))
        logger.debug("Mapped %d services from %d classes", len(descriptors), len(unique))
        return descriptors

    def map_service(self, cls: Type) -> ServiceDescriptor:
        """Build the descriptor of a single class, regardless of its marker."""
        constructor, dependencies = self._find_constructor(cls)
        return ServiceDescriptor(
            service_type=cls,
            constructor=constructor,
            dependencies=dependencies,
            init_hook=self._find_hook(cls, POST_CONSTRUCT_ATTR),
            destroy_hook=self._find_hook(cls, PRE_DESTROY_ATTR),
            producers=self._find_producers(cls),
            marker=vars(cls).get(SERVICE_MARKER_ATTR),
        )

    def _find_constructor(self, cls: Type) -> Tuple[Callable[..., Any], List[Type]]:
        factories = [name for name, member in declared_members(cls) if has_flag(member, AUTOWIRED_ATTR)]
        if len(factories) > 1:
            raise MappingError(cls, f"More than one @autowired constructor: {', '.join(factories)}")
        if factories:
            factory = getattr(cls, factories[0])
            return factory, self._parameter_types(cls, factory, unwrap_function(factory), skip_first=False)
        if cls.__init__ is object.__init__:
            return cls, []
        return cls, self._parameter_types(cls, cls.__init__, cls.__init__, skip_first=True)

    def _parameter_types(
        self,
        cls: Type,
        signature_target: Callable,
        hints_target: Callable,
        skip_first: bool,
    ) -> List[Type]:
        try:
            signature = inspect.signature(signature_target)
            type_hints = get_type_hints(hints_target)
        except (NameError, TypeError, ValueError) as e:
            raise MappingError(cls, f"Cannot inspect constructor: {e}") from e

        parameters = list(signature.parameters.values())
        if skip_first:
            parameters = parameters[1:]

        dependencies = []
        for param in parameters:
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            if param.default is not inspect.Parameter.empty:
                continue
            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                raise MappingError(cls, f"Keyword-only parameter '{param.name}' has no default value")
            if param.name not in type_hints:
                raise MappingError(cls, f"Parameter '{param.name}' lacks type hint and has no default value")
            param_type = type_hints[param.name]
            if not isinstance(param_type, type):
                raise MappingError(cls, f"Parameter '{param.name}' must be annotated with a class, got {param_type!r}")
            dependencies.append(param_type)
        return dependencies

    def _find_hook(self, cls: Type, attribute: str) -> Optional[Callable[[Any], Any]]:
        hooks = [
            (name, member)
            for name, member in declared_members(cls)
            if inspect.isfunction(member) and has_flag(member, attribute)
        ]
        if not hooks:
            return None
        if len(hooks) > 1:
            raise MappingError(cls, f"More than one hook of the same kind: {', '.join(name for name, _ in hooks)}")
        name, hook = hooks[0]
        self._require_zero_arguments(cls, name, hook)
        return hook

    def _find_producers(self, cls: Type) -> List[ProducerSpec]:
        producers = []
        for name, member in declared_members(cls):
            if not inspect.isfunction(member):
                continue
            marker = getattr(member, PRODUCER_MARKER_ATTR, None)
            if marker is None or marker not in self._config.producer_markers:
                continue
            self._require_zero_arguments(cls, name, member)
            try:
                return_type = get_type_hints(member).get("return")
            except NameError as e:
                raise MappingError(cls, f"Cannot resolve return type of '{name}': {e}") from e
            if return_type is None or return_type is type(None):
                raise MappingError(cls, f"Producer '{name}' must declare a non-None return type")
            if not isinstance(return_type, type):
                raise MappingError(cls, f"Producer '{name}' must return a class, got {return_type!r}")
            producers.append(ProducerSpec(name=name, method=member, return_type=return_type))
        return producers

    @staticmethod
    def _require_zero_arguments(cls: Type, name: str, method: Callable) -> None:
        parameters = list(inspect.signature(method).parameters.values())
        if len(parameters) != 1:
            raise MappingError(cls, f"Method '{name}' must take no arguments besides self")
