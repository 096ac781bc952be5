# tests/core/traceability/test_event_log.py
"""Testes do Event Log estruturado."""

from atlas_recipes.core.traceability.event_log import RECIPE_SCOPE, EventLog


def test_events_carry_required_fields_and_extras():
    log = EventLog(recipe_id="r1")

    log.log(step_id="center_1", level="info", message="step trained", event_type="step_trained", number=1)

    event = log.events[0]
    for key in ("recipe_id", "step_id", "level", "message", "timestamp"):
        assert key in event
    assert event["recipe_id"] == "r1"
    assert event["number"] == 1


def test_recipe_scope_when_step_id_is_missing():
    log = EventLog(recipe_id="r1")

    log.log(step_id=None, level="info", message="prepare started", event_type="prepare_started")
    log.add_warning(step_id=None, message="careful")

    assert log.events[0]["step_id"] == RECIPE_SCOPE
    assert log.warnings == {RECIPE_SCOPE: ["careful"]}


def test_of_type_and_extend_preserve_order():
    main = EventLog(recipe_id="r1")
    main.log(step_id=None, level="info", message="a", event_type="first")

    other = EventLog(recipe_id="r1")
    other.log(step_id="s1", level="info", message="b", event_type="second")
    other.log(step_id="s2", level="error", message="c", event_type="second")
    other.add_warning(step_id="s1", message="w")

    main.extend(other)

    assert [e["message"] for e in main.events] == ["a", "b", "c"]
    assert [e["step_id"] for e in main.of_type("second")] == ["s1", "s2"]
    assert main.warnings == {"s1": ["w"]}
