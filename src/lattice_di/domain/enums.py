from enum import Enum


class DescriptorKind(str, Enum):
    """Defines how a descriptor's instance is built.

    Attributes:
        SERVICE: Built by calling the designated constructor with resolved dependencies.
        PRODUCER: Built by invoking a producer method on its owner's instance.
    """

    SERVICE = "service"
    PRODUCER = "producer"

    def __str__(self) -> str:
        return self.value
