"""Base model for readings delivered by the radio layer.

Every reading model inherits from :class:`GoveeBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase wire keys (``tempInC``) map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, whitespace-only strings, NaN) so the field default is
  used instead.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from pygovee._constants import SENTINELS


class GoveeBaseModel(BaseModel):
    """Base for wire models emitted by the radio collaborator."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original wire dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_wire_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = GoveeBaseModel._clean_dict(original)
        # Keep an explicitly passed raw= untouched.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
