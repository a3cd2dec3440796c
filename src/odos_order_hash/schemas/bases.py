"""
Base Schema Models for odos-order-hash

This module defines the base class that every schema model inherits from.
Type schemas and domains are configuration: they are built once, validated
at construction and never mutated afterwards, so the base model is frozen.

Core Classes:
    - CanonicalModel: Frozen Pydantic base model with canonical JSON serialization

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Frozen Pydantic base model with canonical JSON serialization.

    Features:
        - Immutable after construction (``frozen=True``)
        - Deterministic key sorting in JSON output
        - No extra whitespace, so two equal models always serialize to
          the same string

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        canonical_json = model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string.

        ``model_dump(mode="json")`` turns nested models and bytes into plain
        JSON types; ``json.dumps`` with sorted keys and compact separators
        makes the output deterministic.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json")
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()
