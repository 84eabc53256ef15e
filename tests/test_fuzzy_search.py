from conftest import CLIENTS

from paperbot.models import ClientView
from paperbot.services.fuzzy_search import (
    flatten_groups,
    group_candidates,
    levenshtein_distance,
    match,
    match_with_transliteration,
    max_allowed_distance,
    score_candidate,
    search_clients,
)

NAME = ("name",)


def names(results):
    return [item["name"] for item in results]


class TestLevenshteinDistance:
    def test_known_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_identity_is_zero(self):
        for text in ["", "a", "Cafe Dono", "Кафе"]:
            assert levenshtein_distance(text, text) == 0

    def test_symmetric(self):
        pairs = [("dono", "cafe dono"), ("", "abc"), ("lotus", "lotos"), ("кафе", "kafe")]
        for a, b in pairs:
            assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_empty_string_costs_length(self):
        assert levenshtein_distance("", "dono") == 4


class TestMaxAllowedDistance:
    def test_short_queries_floor_at_three(self):
        assert max_allowed_distance(0) == 3
        assert max_allowed_distance(4) == 3
        assert max_allowed_distance(9) == 3

    def test_long_queries_scale(self):
        assert max_allowed_distance(10) == 4
        assert max_allowed_distance(22) == 8

    def test_non_decreasing(self):
        limits = [max_allowed_distance(length) for length in range(0, 200)]
        assert limits == sorted(limits)


class TestMatchPassthrough:
    def test_empty_query_returns_input_in_order(self):
        items = [{"name": "b"}, {"name": "a"}, {"name": "c"}]
        assert match(items, "", NAME) == items

    def test_whitespace_query_returns_input(self):
        items = [{"name": "b"}, {"name": "a"}]
        assert match(items, "   \t", NAME) == items

    def test_empty_collection(self):
        assert match([], "dono", NAME) == []


class TestMatchSubstring:
    def test_cafe_dono_scenario(self):
        items = [{"name": "Cafe Dono"}, {"name": "Tea House Lotus"}, {"name": "Cafe Dolce"}]
        assert names(match(items, "Dono", NAME)) == ["Cafe Dono"]

    def test_case_insensitive(self):
        items = [{"name": "CAFE DONO"}]
        assert names(match(items, "cafe dono", NAME)) == ["CAFE DONO"]

    def test_query_is_stripped(self):
        items = [{"name": "Cafe Dono"}]
        assert names(match(items, "  dono  ", NAME)) == ["Cafe Dono"]

    def test_substring_ties_keep_collection_order(self):
        items = [{"name": "Lotus"}, {"name": "Cafe Dono"}, {"name": "Dono Bar"}]
        assert names(match(items, "dono", NAME)) == ["Cafe Dono", "Dono Bar"]

    def test_substring_ranks_before_edit_distance(self):
        items = [{"name": "Cafe Dona"}, {"name": "Best Cafe Dono"}]
        assert names(match(items, "cafe dono", NAME)) == ["Best Cafe Dono", "Cafe Dona"]

    def test_any_field_can_contain_query(self):
        items = [{"name": "Lotus", "orgName": "Dono LLC"}]
        assert match(items, "dono", ("name", "orgName")) == items


class TestMatchEditDistance:
    def test_typo_within_threshold(self):
        items = [{"name": "Cafe Dono"}]
        assert names(match(items, "Cafe Dnoo", NAME)) == ["Cafe Dono"]

    def test_sorted_by_distance(self):
        items = [{"name": "Cafa Duna"}, {"name": "Cafe Dona"}]
        assert names(match(items, "cafe dono", NAME)) == ["Cafe Dona", "Cafa Duna"]

    def test_equal_distance_keeps_collection_order(self):
        items = [{"name": "Cafe Duno"}, {"name": "Cafe Dona"}]
        assert names(match(items, "cafe dono", NAME)) == ["Cafe Duno", "Cafe Dona"]

    def test_beyond_threshold_is_dropped(self):
        items = [{"name": "wxyz"}]
        assert match(items, "abcd", NAME) == []

    def test_long_query_is_more_forgiving(self):
        items = [{"name": "Tea Hause Lotos Gardan"}]
        assert len(match(items, "tea house lotus garden", NAME)) == 1

    def test_best_field_wins(self):
        item = {"name": "Something Else", "orgName": "Cafe Dona"}
        assert score_candidate(item, "cafe dono", ("name", "orgName")) == 1


class TestMatchEmptyFields:
    def test_missing_field_counts_as_empty(self):
        assert score_candidate({"id": "x"}, "ab", NAME) == 2

    def test_empty_fields_match_only_trivially_short_queries(self):
        items = [{"id": "x", "name": ""}]
        assert match(items, "ab", NAME) == items
        assert match(items, "abcd", NAME) == []

    def test_never_raises_on_odd_values(self):
        items = [{"name": None}, {"name": 42}, {"name": "4200 cafe"}]
        assert match(items, "4200", NAME) == [{"name": "4200 cafe"}, {"name": 42}]


class TestMatchWithTransliteration:
    def test_cyrillic_query_finds_latin_candidate(self):
        items = [{"id": "1", "name": "Kafe Dono"}, {"id": "2", "name": "Lotus"}]
        assert match(items, "Кафе Доно", NAME) == []
        assert names(match_with_transliteration(items, "Кафе Доно", NAME)) == ["Kafe Dono"]

    def test_latin_query_leaves_cyrillic_candidate(self):
        items = [{"id": "1", "name": "Кафе Доно"}]
        assert match_with_transliteration(items, "Kafe Dono", NAME) == []

    def test_literal_results_come_first(self):
        items = [
            ClientView(id="latin", name="Kafe Dono"),
            ClientView(id="cyrillic", name="Кафе Доно"),
        ]
        result = match_with_transliteration(items, "Кафе Доно", NAME)
        assert [client.id for client in result] == ["cyrillic", "latin"]

    def test_dedup_by_id(self):
        client = ClientView(id="c1", name="Кафе Доно", org_name="Kafe Dono LLC")
        result = match_with_transliteration([client], "Кафе Доно", ("name", "org_name"))
        assert result == [client]

    def test_dedup_by_equality_without_id(self):
        item = {"name": "Кафе Доно", "orgName": "kafe dono"}
        result = match_with_transliteration([item], "Кафе Доно", ("name", "orgName"))
        assert result == [item]

    def test_unhashable_id_falls_back_to_equality(self):
        item = {"id": ["x"], "name": "кафе", "orgName": "kafe"}
        result = match_with_transliteration([item], "кафе", ("name", "orgName"))
        assert result == [item]

    def test_empty_query_passthrough(self):
        items = [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
        assert match_with_transliteration(items, " ", NAME) == items


class TestSearchClients:
    def test_mixed_script_search(self):
        clients = [ClientView.from_document(doc) for doc in CLIENTS]
        result = search_clients(clients, "Кафе Доно")
        assert [client.id for client in result] == ["c4", "c1"]

    def test_searches_org_name(self):
        clients = [ClientView.from_document(doc) for doc in CLIENTS]
        result = search_clients(clients, "dono llc")
        assert [client.id for client in result] == ["c1"]


class TestGrouping:
    def _clients(self):
        return [
            ClientView(id="a1", name="Cafe Dono", product_id="p1"),
            ClientView(id="b1", name="Cafe Dolce", product_id="p1"),
            ClientView(id="a2", name="Cafe Dono", product_id="p1", branch_name="Chilanzar"),
            ClientView(id="a3", name="Cafe Dono", product_id="p2"),
            ClientView(id="n1", name="Cafe Dono"),
        ]

    def test_groups_by_name_and_product(self):
        groups = group_candidates(self._clients())
        assert list(groups) == [
            ("Cafe Dono", "p1"),
            ("Cafe Dolce", "p1"),
            ("Cafe Dono", "p2"),
            ("Cafe Dono", "default"),
        ]
        assert [client.id for client in groups[("Cafe Dono", "p1")]] == ["a1", "a2"]

    def test_flatten_keeps_every_candidate_once(self):
        clients = self._clients()
        flat = flatten_groups(group_candidates(clients))
        assert len(flat) == len(clients)
        assert sorted(client.id for client in flat) == sorted(client.id for client in clients)

    def test_flatten_places_branches_together(self):
        flat = flatten_groups(group_candidates(self._clients()))
        assert [client.id for client in flat] == ["a1", "a2", "b1", "a3", "n1"]
