from gqlbridge.json_like import (
    gather_path_matches,
    get_key,
    get_path,
    group_by,
    group_by_key,
)

NESTED = {
    "data": [
        {"user": {"id": "1"}},
        {"user": {"id": "2"}},
        {"user": {"id": "3"}},
        {"user": [{"id": "4"}, {"id": "5"}]},
    ]
}


def test_gather_path_matches():
    data = [{"id": "1"}, {"id": "2"}, {"id": "3"}]
    actual = gather_path_matches(data, ["id"])
    assert actual == [
        ("1", {"id": "1"}),
        ("2", {"id": "2"}),
        ("3", {"id": "3"}),
    ]


def test_gather_path_matches_nested():
    actual = gather_path_matches(NESTED, ["data", "user", "id"])
    assert actual == [
        ("1", {"id": "1"}),
        ("2", {"id": "2"}),
        ("3", {"id": "3"}),
        ("4", {"id": "4"}),
        ("5", {"id": "5"}),
    ]


def test_gather_path_matches_missing_key():
    assert gather_path_matches({"a": 1}, ["b"]) == []


def test_group_by_key():
    pairs = [
        ("1", {"id": "1"}),
        ("2", {"id": "2"}),
        ("2", {"id": "2"}),
        ("3", {"id": "3"}),
    ]
    assert group_by_key(pairs) == {
        "1": [{"id": "1"}],
        "2": [{"id": "2"}, {"id": "2"}],
        "3": [{"id": "3"}],
    }


def test_group_by_numeric_key():
    pairs = [
        (1, {"id": 1}),
        (2, {"id": 2}),
        (2, {"id": 2}),
        (3, {"id": 3}),
    ]
    assert group_by_key(pairs) == {
        "1": [{"id": 1}],
        "2": [{"id": 2}, {"id": 2}],
        "3": [{"id": 3}],
    }


def test_group_by_fractional_key():
    assert group_by_key([(1.5, {"id": 1.5})]) == {"1.5": [{"id": 1.5}]}


def test_group_by_key_drops_other_types():
    pairs = [(True, {"id": True}), (None, {"id": None}), ("x", {"id": "x"})]
    assert group_by_key(pairs) == {"x": [{"id": "x"}]}


def test_group_by_nested():
    result = group_by(NESTED, ["data", "user", "id"])
    assert list(result) == ["1", "2", "3", "4", "5"]
    assert result["4"] == [{"id": "4"}]


def test_get_path_objects_and_arrays():
    data = {"a": [{"b": "c"}]}
    assert get_path(data, ["a", "0", "b"]) == "c"
    assert get_path(data, []) == data


def test_get_path_missing():
    data = {"a": [{"b": "c"}]}
    assert get_path(data, ["a", "1"]) is None
    assert get_path(data, ["a", "x"]) is None
    assert get_path(data, ["a", "-1"]) is None
    assert get_path(data, ["a", "0", "b", "c"]) is None


def test_get_key():
    assert get_key({"a": 1}, "a") == 1
    assert get_key({"a": 1}, "b") is None
    assert get_key([1], "a") is None