# src/ampify/styles/model.py
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


class PluginSpec(BaseModel):
    name: str
    options: Dict[str, Any] = Field(default_factory=dict)


class StyleConfig(BaseModel):
    """
    A discovered stylesheet configuration.

    `plugins` accepts the two shapes found in config files:
        {"comments": {}, "minify": {}}              (mapping, order preserved)
        ["comments", ["autoprefix", {...}]]         (list of names or pairs)
    """
    source: Path
    plugins: List[PluginSpec] = Field(default_factory=list)

    @field_validator('plugins', mode='before')
    @classmethod
    def normalize_plugins(cls, v):
        if v is None:
            return []
        if isinstance(v, dict):
            return [{"name": name, "options": opts or {}} for name, opts in v.items()]
        if isinstance(v, list):
            specs = []
            for item in v:
                if isinstance(item, str):
                    specs.append({"name": item})
                elif isinstance(item, (list, tuple)) and len(item) == 2:
                    specs.append({"name": item[0], "options": item[1] or {}})
                else:
                    specs.append(item)
            return specs
        return v
