from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a service instance.

    Attributes:
        SINGLETON: At most one instance per recipe, shared across all resolutions.
        TRANSIENT: New instance produced on every resolution.
    """

    TRANSIENT = "transient"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value
