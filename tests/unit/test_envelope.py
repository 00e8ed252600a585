# shopadmin Unit Tests - Response envelopes

import pytest

from shopadmin.envelope import unwrap_collection, unwrap_entity

ENTITY = {"id": 7, "name": "Pho"}


class TestUnwrapEntity:

    @pytest.mark.parametrize("payload", [
        ENTITY,
        {"data": ENTITY},
        {"data": {"data": ENTITY}},
    ])
    def test_all_shapes_yield_the_entity(self, payload):
        assert unwrap_entity(payload) == ENTITY

    def test_null_data_falls_back_to_payload(self):
        payload = {"data": None, "message": "ok"}
        assert unwrap_entity(payload) == payload

    def test_non_dict_passthrough(self):
        assert unwrap_entity(None) is None
        assert unwrap_entity([1, 2]) == [1, 2]


class TestUnwrapCollection:

    @pytest.mark.parametrize("payload", [
        [ENTITY],
        {"data": [ENTITY]},
        {"data": {"data": [ENTITY], "current_page": 1}},
    ])
    def test_standard_shapes(self, payload):
        assert unwrap_collection(payload) == [ENTITY]

    def test_resource_named_key(self):
        assert unwrap_collection({"users": [ENTITY]}, "users") == [ENTITY]
        assert unwrap_collection({"users": {"data": [ENTITY]}}, "users") == [ENTITY]

    def test_data_wins_over_named_key(self):
        assert unwrap_collection({"data": [1], "items": [2]}, "items") == [1]

    @pytest.mark.parametrize("payload", [None, "text", {}, {"data": "x"}, {"items": [1]}])
    def test_unrecognized_is_empty(self, payload):
        assert unwrap_collection(payload) == []
