"""Declarative command definitions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CommandModel(BaseModel):
    """Base model with strict config parsing."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ParamSpec(CommandModel):
    id: str
    description: str = ""
    type: Literal["untyped", "int"] = "untyped"
    required: bool = False


class RestrictionEntrySpec(CommandModel):
    id: str = ""
    name: str = ""


class RestrictionRuleSpec(CommandModel):
    concept: Literal["include", "exclude"]
    entries: list[RestrictionEntrySpec] = Field(default_factory=list, alias="data")


class RestrictionsSpec(CommandModel):
    mode: Literal["last", "all"] = "last"
    rules: list[RestrictionRuleSpec] = Field(default_factory=list)


class CommandSpec(CommandModel):
    """One command and its subtree."""

    pattern_type: Literal["word", "regex"] = Field(default="word", alias="patternType")
    patterns: list[str] = Field(min_length=1)
    description: str = ""
    params: list[ParamSpec] = Field(default_factory=list)
    subcommands: list[CommandSpec] = Field(default_factory=list)
    restrictions: RestrictionsSpec = Field(default_factory=RestrictionsSpec)

    @model_validator(mode="after")
    def _params_or_subcommands(self) -> CommandSpec:
        if self.params and self.subcommands:
            raise ValueError(f"command {self.patterns[0]!r} declares both params and subcommands")
        return self


class CommandsFile(CommandModel):
    """Root of a commands file."""

    version: int = 1
    commands: list[CommandSpec] = Field(default_factory=list)
