from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models speak camelCase, python code keeps snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    message: str


def require_text(value: str | None, message: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValueError(message)
    return trimmed
