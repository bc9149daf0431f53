"""Prepared statement request model."""

from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

# Values a caller may bind to a placeholder. Strict so that Decimal, bytes
# and friends are rejected instead of silently converted.
ScalarValue = Union[None, StrictBool, StrictInt, StrictFloat, StrictStr]


class PreparedStatement(BaseModel):
    """SQL text with ``:name`` placeholders and the values bound to them."""

    model_config = ConfigDict(frozen=True)

    sql: StrictStr = Field(..., min_length=1, description="SQL with named placeholders")
    params: dict[str, ScalarValue] = Field(
        default_factory=dict,
        description="Placeholder name to bound value",
    )

    @field_validator("sql")
    @classmethod
    def validate_sql(cls, v: str) -> str:
        """Reject blank statements."""
        if not v.strip():
            raise ValueError("SQL statement must not be blank")
        return v

    @field_validator("params", mode="before")
    @classmethod
    def normalize_param_names(cls, v: Optional[dict]) -> dict:
        """Accept both ``":name"`` and ``"name"`` keys."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("params must be a mapping of placeholder to value")
        return {str(key).lstrip(":"): value for key, value in v.items()}
