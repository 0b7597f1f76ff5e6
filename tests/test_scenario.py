import pytest

from orderbook.models import OrderType, Side
from orderbook.scenario import (
    Action,
    ActionType,
    ScenarioError,
    ScenarioResult,
    load_scenario,
    parse_scenario,
    run_scenario,
)

SCENARIOS = {
    "match_good_till_cancel": [
        "A B GoodTillCancel 100 10 1",
        "A S GoodTillCancel 100 10 2",
        "R 0 0 0",
    ],
    "match_fill_and_kill": [
        "A B GoodTillCancel 100 10 1",
        "A B GoodTillCancel 90 5 3",
        "A S FillAndKill 95 20 2",
        "R 1 1 0",
    ],
    "match_fill_or_kill_hit": [
        "A B GoodTillCancel 100 10 1",
        "A S FillOrKill 100 10 2",
        "R 0 0 0",
    ],
    "match_fill_or_kill_miss": [
        "A B GoodTillCancel 100 10 1",
        "A S FillOrKill 100 20 2",
        "R 1 1 0",
    ],
    "cancel_success": [
        "A B GoodTillCancel 100 10 1",
        "C 1",
        "R 0 0 0",
    ],
    "modify_side": [
        "A B GoodTillCancel 100 10 1",
        "A S GoodTillCancel 105 10 2",
        "M 1 S 104 10",
        "R 2 0 2",
    ],
    "match_market": [
        "A S GoodTillCancel 100 10 1",
        "A B Market 0 5 2",
        "R 1 0 1",
    ],
}


@pytest.mark.parametrize("name", sorted(SCENARIOS))
def test_scenario_reaches_expected_result(name):
    actions, expected = parse_scenario(SCENARIOS[name])
    assert run_scenario(actions) == expected


@pytest.mark.parametrize("name", sorted(SCENARIOS))
def test_load_scenario_matches_parse(tmp_path, name):
    path = tmp_path / f"{name}.txt"
    path.write_text("\n".join(SCENARIOS[name]) + "\n", encoding="utf-8")
    assert load_scenario(path) == parse_scenario(SCENARIOS[name])


def test_parse_add_line():
    actions, result = parse_scenario(["A B GoodTillCancel 100 10 1", "R 1 1 0"])
    assert actions == [
        Action(ActionType.ADD, 1, Side.BUY, OrderType.GOOD_TILL_CANCEL, 100, 10)
    ]
    assert result == ScenarioResult(1, 1, 0)


def test_parse_modify_and_cancel_lines():
    actions, _ = parse_scenario(["M 7 S 104 3", "C 7", "R 0 0 0"])
    assert actions == [
        Action(ActionType.MODIFY, 7, Side.SELL, None, 104, 3),
        Action(ActionType.CANCEL, 7),
    ]


def test_parse_all_order_types():
    names = ["FillAndKill", "GoodTillCancel", "GoodForDay", "FillOrKill", "Market"]
    lines = [f"A S {name} 10 1 {i}" for i, name in enumerate(names)] + ["R 0 0 0"]
    actions, _ = parse_scenario(lines)
    assert [a.order_type for a in actions] == [
        OrderType.FILL_AND_KILL,
        OrderType.GOOD_TILL_CANCEL,
        OrderType.GOOD_FOR_DAY,
        OrderType.FILL_OR_KILL,
        OrderType.MARKET,
    ]


def test_unknown_lines_are_skipped():
    actions, _ = parse_scenario(["# comment", "C 4", "R 0 0 0"])
    assert actions == [Action(ActionType.CANCEL, 4)]


def test_line_endings_are_stripped():
    actions, result = parse_scenario(["C 4\r\n", "R 0 0 0\r\n"])
    assert actions == [Action(ActionType.CANCEL, 4)]
    assert result == ScenarioResult(0, 0, 0)


def test_missing_result_raises():
    with pytest.raises(ScenarioError, match="No result specified"):
        parse_scenario(["C 1"])


def test_empty_line_stops_reading():
    with pytest.raises(ScenarioError, match="No result specified"):
        parse_scenario(["C 1", "", "R 0 0 0"])


def test_result_must_be_last():
    with pytest.raises(ScenarioError, match="only be specified at the end"):
        parse_scenario(["R 0 0 0", "C 1"])


def test_unknown_side_raises():
    with pytest.raises(ScenarioError, match="Unknown Side"):
        parse_scenario(["A X GoodTillCancel 100 10 1", "R 0 0 0"])


def test_unknown_order_type_raises():
    with pytest.raises(ScenarioError, match="Unknown OrderType"):
        parse_scenario(["A B Forever 100 10 1", "R 0 0 0"])


def test_negative_value_raises():
    with pytest.raises(ScenarioError, match="below zero"):
        parse_scenario(["A B GoodTillCancel -5 10 1", "R 0 0 0"])


def test_empty_price_raises():
    with pytest.raises(ScenarioError, match="Unknown Price"):
        parse_scenario(["A B GoodTillCancel  10 1", "R 0 0 0"])


def test_empty_order_id_raises():
    with pytest.raises(ScenarioError, match="Empty OrderId"):
        parse_scenario(["C ", "R 0 0 0"])


def test_missing_field_raises():
    with pytest.raises(ScenarioError):
        parse_scenario(["A B GoodTillCancel 100", "R 0 0 0"])


def test_non_numeric_raises():
    with pytest.raises(ScenarioError):
        parse_scenario(["C abc", "R 0 0 0"])


def test_run_empty_scenario_gives_empty_book():
    assert run_scenario([]) == ScenarioResult(0, 0, 0)


def test_cancel_of_unknown_order_leaves_book_unchanged():
    base = [Action(ActionType.ADD, 1, Side.BUY, OrderType.GOOD_TILL_CANCEL, 100, 10)]
    assert run_scenario(base + [Action(ActionType.CANCEL, 99)]) == run_scenario(base)