"""Tests for QueryString construction, lookup and mutation."""
import pytest

from qshelper import QueryString, ValidationError, is_valid_query_string
from qshelper.datastructures import StateChangeInstruction
from qshelper.escaping import CallableEscaper


class TestConstruction:
    def test_of_returns_instance(self, make_qs):
        assert isinstance(make_qs("a=1"), QueryString)

    @pytest.mark.parametrize("raw", ["", None, "=value", "a", "a=1&b", "a=b=c", "a=1&&b=2"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            QueryString.of(raw)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            QueryString.of("")

    def test_validation_error_keeps_input(self):
        with pytest.raises(ValidationError) as exc_info:
            QueryString.of("=value")
        assert exc_info.value.query_string == "=value"

    def test_empty_value_passes_validation_but_is_dropped(self, make_qs):
        qs = make_qs("a=1&b=&c=3")
        assert qs.reconstruct() == "a=1&c=3"
        assert "b" not in qs.state

    def test_original_query_string_is_unescaped(self, make_qs):
        qs = make_qs("q=hello%20world&name=caf%C3%A9")
        assert qs.original_query_string == "q=hello world&name=café"

    def test_state_is_read_only(self, make_qs):
        qs = make_qs("a=1")
        with pytest.raises(TypeError):
            qs.state["b"] = []

    def test_custom_escaper(self, make_qs):
        escaper = CallableEscaper(str.upper, str.lower)
        qs = make_qs("A=X&B=Y", escaper)
        assert qs.get_first_value("a") == "x"
        assert qs.reconstruct() == "A=X&B=Y"

    def test_repr(self, make_qs):
        assert repr(make_qs("a=1")) == "<QueryString 'a=1'>"

    def test_direct_construction_skips_validation(self):
        qs = QueryString("=value&a=1")
        assert qs.reconstruct() == "a=1"
        assert not is_valid_query_string("=value&a=1")


class TestReconstruct:
    def test_round_trip(self, search_qs, search_query):
        assert search_qs.reconstruct() == search_query

    def test_str(self, search_qs, search_query):
        assert str(search_qs) == search_query

    def test_re_escapes(self, make_qs):
        assert make_qs("q=hello+world").reconstruct() == "q=hello%20world"
        assert make_qs("q=caf%C3%A9").reconstruct() == "q=caf%C3%A9"

    def test_deterministic(self, search_qs):
        assert search_qs.reconstruct() == search_qs.reconstruct()

    def test_next_position(self, search_qs):
        assert search_qs.next_position() == 6

    def test_next_position_after_removal_of_everything(self, make_qs):
        qs = make_qs("a=1")
        qs.remove_all(["a"])
        assert qs.next_position() == 0


class TestScenario:
    """a=1&b=2&a=3"""

    def test_get_all_values(self, make_qs):
        assert make_qs("a=1&b=2&a=3").get_all_values("a") == ["1", "3"]

    def test_remove_nth(self, make_qs):
        assert make_qs("a=1&b=2&a=3").remove_nth("a", 0) == "b=2&a=3"

    def test_replace_first(self, make_qs):
        assert make_qs("a=1&b=2&a=3").replace_first("b", "9") == "a=1&b=9&a=3"

    def test_add(self, make_qs):
        assert make_qs("a=1&b=2&a=3").add("c", "5") == "a=1&b=2&a=3&c=5"

    def test_remove_key_matching_value(self, make_qs):
        assert make_qs("a=1&b=2&a=3").remove_key_matching_value("a", "3") == "a=1&b=2"

    def test_replace_nth_sort(self, make_qs):
        qs = make_qs("sort=stars,desc&sort=name")
        assert qs.replace_nth({"sort": {1: "address,desc"}}) == (
            "sort=stars,desc&sort=address,desc"
        )


class TestReplace:
    def test_replace_first_keeps_position(self, search_qs):
        assert search_qs.replace_first("sort", "price,asc") == (
            "suburb=Melbourne&postcode=3000&page=0&sort=price,asc&country=AU&sort=name"
        )

    def test_replace_first_missing_key(self, search_qs, search_query):
        assert search_qs.replace_first("missing", "x") == search_query

    def test_replace_first_none(self, search_qs, search_query):
        assert search_qs.replace_first(None, "x") == search_query
        assert search_qs.replace_first("page", None) == search_query

    def test_replace_first_escapes(self, make_qs):
        assert make_qs("q=a").replace_first("q", "a&b") == "q=a%26b"

    def test_replace_n(self, search_qs):
        assert search_qs.replace_n("sort", ["a", "b"]) == (
            "suburb=Melbourne&postcode=3000&page=0&sort=a&country=AU&sort=b"
        )

    def test_replace_n_fewer_values(self, make_qs):
        assert make_qs("a=1&a=2&a=3").replace_n("a", ["x"]) == "a=x&a=2&a=3"

    def test_replace_n_extra_values_not_appended(self, make_qs):
        assert make_qs("a=1&b=2").replace_n("a", ["x", "y", "z"]) == "a=x&b=2"

    def test_replace_n_missing_key(self, make_qs):
        assert make_qs("a=1").replace_n("b", ["x"]) == "a=1"

    def test_replace_n_none_values(self, make_qs):
        assert make_qs("a=1").replace_n("a", None) == "a=1"

    def test_replace_n_skips_non_string_values(self, make_qs):
        qs = make_qs("a=1&b=2")
        assert qs.replace_n("a", [None]) == "a=1&b=2"
        assert qs.reconstruct() == "a=1&b=2"

    def test_replace_n_mixed_values(self, make_qs):
        qs = make_qs("a=1&a=2&a=3")
        assert qs.replace_n("a", ["x", None, 5]) == "a=x&a=2&a=3"

    def test_replace_first_non_string_value(self, make_qs):
        qs = make_qs("a=1")
        assert qs.replace_first("a", 5) == "a=1"
        assert qs.get_first_value("a") == "1"

    def test_replace_nth_many(self, search_qs):
        result = search_qs.replace_nth({"sort": {0: "a", 1: "b"}, "page": {0: "4"}})
        assert result == "suburb=Melbourne&postcode=3000&page=4&sort=a&country=AU&sort=b"

    def test_replace_nth_out_of_range_skipped(self, make_qs):
        qs = make_qs("sort=stars&sort=name")
        assert qs.replace_nth({"sort": {2: "x", -1: "y", 0: "z"}}) == "sort=z&sort=name"

    def test_replace_nth_missing_key(self, make_qs):
        assert make_qs("a=1").replace_nth({"b": {0: "x"}}) == "a=1"

    def test_replace_nth_none(self, make_qs):
        assert make_qs("a=1").replace_nth(None) == "a=1"

    def test_replace_nth_instructions(self, make_qs):
        qs = make_qs("a=1&a=2")
        result = qs.replace_nth([
            StateChangeInstruction("a", 1, "x"),
            ("a", 0, "y"),
        ])
        assert result == "a=y&a=x"

    def test_replace_nth_triple_with_string_index(self, make_qs):
        assert make_qs("a=1&a=2").replace_nth([("a", "1", "x")]) == "a=1&a=x"

    def test_replace_nth_skips_undecodable_triples(self, make_qs):
        qs = make_qs("a=1&a=2")
        result = qs.replace_nth([
            ("a",),
            ("a", 0, "x", "y"),
            None,
            ("a", "z", "x"),
            ("a", 0, None),
            (7, 0, "x"),
        ])
        assert result == "a=1&a=2"
        assert qs.reconstruct() == "a=1&a=2"

    def test_replace_nth_order_independent(self, make_qs):
        forward = make_qs("a=1&a=2&b=3").replace_nth([("a", 0, "x"), ("b", 0, "y")])
        backward = make_qs("a=1&a=2&b=3").replace_nth([("b", 0, "y"), ("a", 0, "x")])
        assert forward == backward == "a=x&a=2&b=y"

    def test_replace_never_moves_entries(self, search_qs):
        before = {e.pair: e.position for entries in search_qs.state.values() for e in entries}
        search_qs.replace_n("sort", ["x", "y"])
        positions = sorted(e.position for entries in search_qs.state.values() for e in entries)
        assert positions == sorted(before.values())


class TestRemove:
    def test_remove_first(self, search_qs):
        assert search_qs.remove_first("sort") == (
            "suburb=Melbourne&postcode=3000&page=0&country=AU&sort=name"
        )

    def test_remove_first_single(self, make_qs):
        assert make_qs("a=1&b=2").remove_first("a") == "b=2"

    def test_remove_first_missing(self, make_qs):
        assert make_qs("a=1").remove_first("b") == "a=1"

    def test_remove_first_until_empty(self, make_qs):
        qs = make_qs("a=1&b=2")
        qs.remove_first("a")
        assert qs.remove_first("a") == "b=2"

    def test_remove_all(self, search_qs):
        assert search_qs.remove_all(["sort", "page"]) == (
            "suburb=Melbourne&postcode=3000&country=AU"
        )

    def test_remove_all_missing_and_none(self, make_qs):
        qs = make_qs("a=1")
        assert qs.remove_all(["b"]) == "a=1"
        assert qs.remove_all(None) == "a=1"

    def test_remove_all_everything(self, make_qs):
        assert make_qs("a=1&b=2").remove_all(["a", "b"]) == ""

    def test_remove_n(self, make_qs):
        assert make_qs("a=1&b=2&a=3&a=4").remove_n("a", 2) == "b=2&a=4"

    def test_remove_n_all(self, make_qs):
        qs = make_qs("a=1&b=2&a=3")
        assert qs.remove_n("a", 5) == "b=2"
        assert "a" not in qs.state

    def test_remove_n_exact_count(self, make_qs):
        assert make_qs("a=1&b=2&a=3").remove_n("a", 2) == "b=2"

    @pytest.mark.parametrize("n", [0, -1, None])
    def test_remove_n_noop(self, make_qs, n):
        assert make_qs("a=1&b=2").remove_n("a", n) == "a=1&b=2"

    def test_remove_n_missing(self, make_qs):
        assert make_qs("a=1").remove_n("b", 1) == "a=1"

    def test_remove_nth(self, make_qs):
        assert make_qs("a=100&b=200&a=300").remove_nth("a", 1) == "a=100&b=200"

    @pytest.mark.parametrize("index", [2, -1, None])
    def test_remove_nth_out_of_range(self, make_qs, index):
        assert make_qs("a=1&a=2").remove_nth("a", index) == "a=1&a=2"

    def test_remove_many_nth(self, make_qs):
        qs = make_qs("a=100&b=200&a=300&a=500")
        assert qs.remove_many_nth("a", [0, 2]) == "b=200&a=300"

    def test_remove_many_nth_set(self, make_qs):
        qs = make_qs("a=1&a=2&a=3")
        assert qs.remove_many_nth("a", {1, 7}) == "a=1&a=3"

    def test_remove_many_nth_noop(self, make_qs):
        assert make_qs("a=1").remove_many_nth("a", []) == "a=1"
        assert make_qs("a=1").remove_many_nth("b", [0]) == "a=1"

    def test_remove_key_matching_value_many(self, make_qs):
        assert make_qs("a=7&b=7&a=7&a=1").remove_key_matching_value("a", "7") == "b=7&a=1"

    def test_remove_key_matching_value_unescaped(self, make_qs):
        assert make_qs("q=a%20b&q=c").remove_key_matching_value("q", "a b") == "q=c"

    def test_remove_key_matching_value_missing(self, make_qs):
        assert make_qs("a=1").remove_key_matching_value("b", "1") == "a=1"

    def test_remove_any_key_matching_value(self, make_qs):
        assert make_qs("a=500&b=700&a=700").remove_any_key_matching_value("700") == "a=500"

    def test_remove_any_key_matching_value_no_match(self, make_qs):
        assert make_qs("a=1&b=2").remove_any_key_matching_value("3") == "a=1&b=2"


class TestLookup:
    def test_get_first_value(self, make_qs):
        assert make_qs("a=500&b=600&a=700").get_first_value("a") == "500"

    def test_get_first_value_missing(self, make_qs):
        assert make_qs("a=1").get_first_value("b") is None

    def test_get_first_value_after_removal(self, make_qs):
        qs = make_qs("a=1")
        qs.remove_first("a")
        assert qs.get_first_value("a") is None

    def test_get_all_values_missing(self, make_qs):
        assert make_qs("a=1").get_all_values("b") == []

    def test_get_all_values_unescaped(self, make_qs):
        assert make_qs("q=a+b&q=c%2Cd").get_all_values("q") == ["a b", "c,d"]


class TestAdd:
    def test_add_to_end(self, make_qs):
        assert make_qs("a=500&b=600").add("c", "700") == "a=500&b=600&c=700"

    def test_add_existing_key_new_value(self, make_qs):
        qs = make_qs("a=1&b=2")
        assert qs.add("a", "3") == "a=1&b=2&a=3"
        assert qs.get_all_values("a") == ["1", "3"]

    def test_add_duplicate_value_is_noop(self, make_qs):
        assert make_qs("a=1&b=2").add("a", "1") == "a=1&b=2"

    def test_add_none(self, make_qs):
        assert make_qs("a=1").add(None, "1") == "a=1"
        assert make_qs("a=1").add("b", None) == "a=1"

    def test_add_after_removing_last(self, make_qs):
        qs = make_qs("a=1&b=2")
        qs.remove_first("b")
        assert qs.add("c", "3") == "a=1&c=3"

    def test_add_to_emptied_state(self, make_qs):
        qs = make_qs("a=1")
        qs.remove_all(["a"])
        assert qs.add("b", "2") == "b=2"
        assert qs.state["b"][0].position == 0

    def test_add_escapes(self, make_qs):
        assert make_qs("a=1").add("q", "x y") == "a=1&q=x%20y"

    def test_add_all(self, make_qs):
        qs = make_qs("a=1")
        assert qs.add_all([("b", "2"), ["c", "3"], ("b", "4")]) == "a=1&b=2&c=3&b=4"
        assert [e.position for e in qs.state["b"]] == [1, 3]

    def test_add_all_skips_malformed(self, make_qs):
        qs = make_qs("a=1")
        assert qs.add_all([("b",), ("", "2"), ("c", ""), ("d", "4", "x"), ("e", "5")]) == "a=1&e=5"

    def test_add_all_does_not_deduplicate(self, make_qs):
        assert make_qs("a=1").add_all([("a", "1")]) == "a=1&a=1"

    def test_add_all_none(self, make_qs):
        assert make_qs("a=1").add_all(None) == "a=1"

    def test_positions_stay_unique(self, make_qs):
        qs = make_qs("a=1&b=2&a=3")
        qs.remove_nth("a", 1)
        qs.add("c", "4")
        qs.add_all([("d", "5"), ("e", "6")])
        positions = [e.position for entries in qs.state.values() for e in entries]
        assert len(positions) == len(set(positions))
