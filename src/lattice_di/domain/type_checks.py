from typing import Any


def is_assignable(required: Any, provided: Any) -> bool:
    """Check whether a value of type ``provided`` can fill a ``required`` slot.

    Non-class hints (``Optional[X]``, ``List[X]``...) only match themselves.
    """
    if required is provided:
        return True
    try:
        return issubclass(provided, required)
    except TypeError:
        return False
