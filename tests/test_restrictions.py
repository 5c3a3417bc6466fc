from flowbot.commands import (
    CommandRegistry,
    RestrictionEntry,
    RestrictionRule,
    Restrictions,
    exclude,
    include,
    resolve_restrictions,
    word,
)
from flowbot.flows import Flow, StaticFlowDirectory


def _release_directory() -> StaticFlowDirectory:
    return StaticFlowDirectory(
        [
            Flow(id="7", name="General", parameterized_name="general"),
            Flow(id="42", name="release", parameterized_name="release-flow"),
        ]
    )


def test_no_rules_always_executes() -> None:
    assert Restrictions().can_execute("anything") is True
    assert Restrictions().can_execute(None) is True


def test_include_rule() -> None:
    restrictions = Restrictions((include("A"),))
    assert restrictions.can_execute("A") is True
    assert restrictions.can_execute("B") is False


def test_exclude_rule() -> None:
    restrictions = Restrictions((exclude("A"),))
    assert restrictions.can_execute("A") is False
    assert restrictions.can_execute("B") is True


def test_multiple_rules_last_rule_wins() -> None:
    # Each rule overwrites the running verdict; earlier rules have no effect.
    include_then_exclude = Restrictions((include("A"), exclude("B")))
    assert include_then_exclude.can_execute("A") is True
    assert include_then_exclude.can_execute("C") is True
    assert include_then_exclude.can_execute("B") is False

    two_includes = Restrictions((include("A"), include("B")))
    assert two_includes.can_execute("A") is False
    assert two_includes.can_execute("B") is True

    exclude_then_include = Restrictions((exclude("A"), include("B")))
    assert exclude_then_include.can_execute("C") is False


def test_all_mode_requires_every_rule() -> None:
    restrictions = Restrictions((include("A", "C"), exclude("C")), mode="all")
    assert restrictions.can_execute("A") is True
    assert restrictions.can_execute("C") is False
    assert restrictions.can_execute("B") is False


def test_resolve_by_display_name_and_keep_first_resolution() -> None:
    directory = _release_directory()
    command = word("deploy", restrictions=Restrictions((include(RestrictionEntry(name="^release")),)))

    resolved = resolve_restrictions([command], directory)
    entry = resolved[0].restrictions.rules[0].entries[0]
    assert entry.id == "42"
    assert entry.name == "^release"
    # The input tree is left untouched.
    assert command.restrictions.rules[0].entries[0].id == ""

    directory.replace([Flow(id="99", name="release", parameterized_name="release")])
    again = resolve_restrictions(resolved, directory)
    assert again[0].restrictions.rules[0].entries[0].id == "42"
    assert again[0] is resolved[0]


def test_resolve_by_parameterized_name() -> None:
    rule = RestrictionRule("include", (RestrictionEntry(name="-flow$"),))
    resolved = rule.resolve(_release_directory())
    assert resolved.flow_ids == frozenset({"42"})


def test_unresolved_names_never_match() -> None:
    restrictions = Restrictions((include(RestrictionEntry(name="^nope")),))
    resolved = restrictions.resolve(_release_directory())
    assert resolved.unresolved() == ["^nope"]
    assert resolved.can_execute("") is False
    assert resolved.can_execute("42") is False


def test_invalid_name_pattern_stays_unresolved() -> None:
    restrictions = Restrictions((exclude(RestrictionEntry(name="(")),))
    resolved = restrictions.resolve(_release_directory())
    assert resolved.unresolved() == ["("]
    assert resolved.can_execute("42") is True


def test_registry_ready_resolves_subcommands_and_keeps_handlers() -> None:
    prod = word("prod", restrictions=Restrictions((include(RestrictionEntry(name="^release")),)))
    prod.on("default", lambda outcome, entry: None)
    registry = CommandRegistry([word("deploy", subcommands=[prod])])

    registry.ready(_release_directory())
    assert registry.is_ready

    resolved_prod = registry.commands[0].subcommands[0]
    assert resolved_prod is not prod
    assert resolved_prod.handler_for("default") is prod.handler_for("default")
    assert registry.match("deploy prod", flow="42").handler_type == "default"
    assert registry.match("deploy prod", flow="7").handler_type == "restricted"
