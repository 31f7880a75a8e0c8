"""Base schema for the JSON wire format.

Fields are declared in snake_case and exposed in camelCase. Input accepts
either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def split_csv(value: str | list[str] | None) -> list[str]:
    """Split a comma-separated query value, dropping blanks."""
    if value is None:
        return []
    parts = value if isinstance(value, list) else value.split(",")
    result = []
    for part in parts:
        for item in part.split(","):
            item = item.strip()
            if item:
                result.append(item)
    return result
