"""Base pydantic model for YAML configuration documents."""

from pydantic import BaseModel, ConfigDict


def kebab(name: str) -> str:
    return name.replace("_", "-")


class KebabModel(BaseModel):
    """Immutable configuration section with kebab-case keys and no unknown keys."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=kebab,
    )
