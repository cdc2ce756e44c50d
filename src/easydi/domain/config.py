from pydantic import BaseModel, ConfigDict, Field

from easydi.domain.enums import Lifetime


class ContainerConfig(BaseModel):
    """Container-wide settings.

    Attributes:
        component_lifetime: Lifetime given to scanned components that do not declare one.
        memoize_assignability: Cache subtype checks made during capability lookup.
    """

    model_config = ConfigDict(frozen=True)

    component_lifetime: Lifetime = Field(
        default=Lifetime.SINGLETON,
        description="Lifetime for scanned components without an explicit lifetime.",
    )
    memoize_assignability: bool = Field(
        default=True,
        description="Whether capability lookups memoize subtype checks.",
    )
