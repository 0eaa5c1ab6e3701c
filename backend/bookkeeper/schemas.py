"""Shared pydantic base for request bodies.

The API speaks camelCase on the wire; models are declared in snake_case so
``model_dump()`` keys line up with the mapped column names.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
