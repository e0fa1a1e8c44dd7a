from pydantic import BaseModel, ConfigDict


class System(BaseModel):
    """A top-level vehicle subsystem (engine, suspension, brakes, ...)."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str = ""
    display_color: str = "#666666"


class Component(BaseModel):
    """A named part inside a system; the target of upgrade impact edges."""

    model_config = ConfigDict(frozen=True)

    key: str  # "<system_key>.<component-name>"
    name: str
    system_key: str
    description: str = ""
