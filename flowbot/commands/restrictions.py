"""Flow-scoped include/exclude restrictions and the one-shot name resolver."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal, TypeAlias

from loguru import logger

if TYPE_CHECKING:
    from flowbot.commands.node import Command
    from flowbot.flows.directory import FlowDirectory

RestrictionConcept: TypeAlias = Literal["include", "exclude"]
RestrictionMode: TypeAlias = Literal["last", "all"]


@dataclass(frozen=True, slots=True)
class RestrictionEntry:
    """One flow reference; ``name`` is a regex resolved to ``id`` via the flow directory."""

    id: str = ""
    name: str = ""

    @property
    def needs_resolution(self) -> bool:
        return not self.id and bool(self.name)


@dataclass(frozen=True, slots=True)
class RestrictionRule:
    """Include or exclude the listed flows."""

    concept: RestrictionConcept
    entries: tuple[RestrictionEntry, ...] = ()

    @property
    def flow_ids(self) -> frozenset[str]:
        return frozenset(entry.id for entry in self.entries if entry.id)

    def verdict(self, flow: str | None) -> bool:
        listed = flow is not None and flow in self.flow_ids
        if self.concept == "include":
            return listed
        return not listed

    def resolve(self, directory: FlowDirectory) -> RestrictionRule:
        entries: list[RestrictionEntry] = []
        changed = False
        for entry in self.entries:
            if entry.needs_resolution:
                flow = directory.lookup_by_name(entry.name)
                if flow is not None:
                    entry = replace(entry, id=flow.id)
                    changed = True
                else:
                    logger.debug(f"Restriction flow name {entry.name!r} did not resolve")
            entries.append(entry)
        if not changed:
            return self
        return replace(self, entries=tuple(entries))


@dataclass(frozen=True, slots=True)
class Restrictions:
    """Ordered restriction rules attached to one command.

    In the default ``last`` mode every rule overwrites the running verdict, so
    the final rule alone decides when several are declared. ``all`` requires
    every rule to pass.
    """

    rules: tuple[RestrictionRule, ...] = ()
    mode: RestrictionMode = "last"

    def __bool__(self) -> bool:
        return bool(self.rules)

    def can_execute(self, flow: str | None) -> bool:
        """Whether a message posted on ``flow`` may run the command."""
        if not self.rules:
            return True

        if self.mode == "all":
            return all(rule.verdict(flow) for rule in self.rules)

        allowed = True
        for rule in self.rules:
            allowed = rule.verdict(flow)
        return allowed

    def resolve(self, directory: FlowDirectory) -> Restrictions:
        rules = tuple(rule.resolve(directory) for rule in self.rules)
        if all(new is old for new, old in zip(rules, self.rules)):
            return self
        return replace(self, rules=rules)

    def unresolved(self) -> list[str]:
        return [entry.name for rule in self.rules for entry in rule.entries if entry.needs_resolution]


def include(*flows: str | RestrictionEntry) -> RestrictionRule:
    """Build an include rule from flow ids or entries."""
    return RestrictionRule("include", _entries(flows))


def exclude(*flows: str | RestrictionEntry) -> RestrictionRule:
    """Build an exclude rule from flow ids or entries."""
    return RestrictionRule("exclude", _entries(flows))


def _entries(flows: Iterable[str | RestrictionEntry]) -> tuple[RestrictionEntry, ...]:
    return tuple(flow if isinstance(flow, RestrictionEntry) else RestrictionEntry(id=flow) for flow in flows)


def resolve_restrictions(commands: Sequence[Command], directory: FlowDirectory) -> list[Command]:
    """Return a copy of the command tree with restriction flow names resolved to ids.

    Entries that already carry an id are kept as they are, so running the pass
    again never changes an earlier resolution. Names with no matching flow stay
    unresolved and never match any flow.
    """
    resolved: list[Command] = []
    for command in commands:
        restrictions = command.restrictions.resolve(directory)
        subcommands = resolve_restrictions(command.subcommands, directory)
        if restrictions is command.restrictions and all(
            new is old for new, old in zip(subcommands, command.subcommands)
        ):
            resolved.append(command)
            continue
        resolved.append(command.copy_with(restrictions=restrictions, subcommands=subcommands))
    return resolved
