import logging
from typing import Any, Callable, Optional

from lattice_di.domain import (
    ConstructionError,
    DestroyHookError,
    DIException,
    IInstantiationService,
    InitHookError,
    ProducerConstructionError,
    ProducerDescriptor,
    ServiceDescriptor,
)

logger = logging.getLogger(__name__)


def _hook_name(hook: Optional[Callable[..., Any]]) -> str:
    return getattr(hook, "__name__", repr(hook))


class InstantiationService(IInstantiationService):
    """Builds, initializes and discards the instance held by a descriptor.

    Every side effect lands on the descriptor passed in; the service itself is
    stateless and can be shared by the resolution engine and the container.
    """

    def create_instance(self, descriptor: ServiceDescriptor, *args: Any) -> None:
        """Construct the descriptor's instance and run its init hook.

        Args:
            descriptor: The descriptor to build.
            *args: Resolved dependencies in constructor-parameter order.

        Raises:
            ConstructionError: If the argument count mismatches or the constructor fails.
            InitHookError: If the init hook fails. The instance stays set.

        Example:
            >>> service = InstantiationService()
            >>> service.create_instance(repository_descriptor)
            >>> service.create_instance(user_service_descriptor, repository_descriptor.instance)
        """
        service_type = descriptor.service_type
        if descriptor.constructor is None:
            raise ConstructionError(service_type, "Descriptor has no constructor")
        if len(args) != len(descriptor.dependencies):
            raise ConstructionError(
                service_type,
                f"Constructor parameters count mismatch: expected {len(descriptor.dependencies)}, got {len(args)}",
            )

        try:
            instance = descriptor.constructor(*args)
        except DIException:
            raise
        except Exception as e:
            raise ConstructionError(service_type, str(e)) from e

        descriptor.set_instance(instance)
        logger.debug("Created instance of %s", service_type.__name__)
        self._invoke_init_hook(descriptor)

    def _invoke_init_hook(self, descriptor: ServiceDescriptor) -> None:
        hook = descriptor.init_hook
        if hook is None:
            return
        try:
            hook(descriptor.instance)
        except Exception as e:
            raise InitHookError(descriptor.service_type, _hook_name(hook), str(e)) from e

    def create_producer_instance(self, descriptor: ProducerDescriptor) -> None:
        """Invoke the producer method on the owner's live instance.

        Raises:
            ProducerConstructionError: If the owner is not built or the method raised.
        """
        owner = descriptor.owner
        if not owner.is_built:
            raise ProducerConstructionError(
                descriptor.service_type,
                f"Owner {owner.service_type.__name__} is not built",
            )
        try:
            value = descriptor.method(owner.instance)
        except Exception as e:
            raise ProducerConstructionError(descriptor.service_type, str(e)) from e

        descriptor.set_instance(value)
        logger.debug(
            "Produced %s from %s.%s",
            descriptor.service_type.__name__,
            owner.service_type.__name__,
            _hook_name(descriptor.method),
        )

    def destroy_instance(self, descriptor: ServiceDescriptor) -> None:
        """Run the destroy hook if present, then clear the instance.

        Raises:
            DestroyHookError: If the hook fails. The instance is cleared anyway.
        """
        hook = descriptor.destroy_hook
        try:
            if hook is not None and descriptor.is_built:
                try:
                    hook(descriptor.instance)
                except Exception as e:
                    raise DestroyHookError(descriptor.service_type, _hook_name(hook), str(e)) from e
        finally:
            descriptor.clear_instance()
            logger.debug("Destroyed instance of %s", descriptor.service_type.__name__)
