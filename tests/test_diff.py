"""Tests for the structural diff engine."""

import json

import pytest

from config_switch.diff import compare, diff_documents, values_equal
from config_switch.exceptions import DocumentFormatError, FileAccessError


class TestValuesEqual:
    def test_bool_is_not_number(self):
        assert not values_equal(True, 1)
        assert not values_equal(0, False)

    def test_int_equals_float(self):
        assert values_equal(1, 1.0)

    def test_deep_arrays(self):
        assert values_equal([1, {"a": [2]}], [1, {"a": [2]}])
        assert not values_equal([1, 2], [2, 1])

    def test_container_vs_scalar(self):
        assert not values_equal([], None)
        assert not values_equal({}, "")


class TestDiffDocuments:
    def test_identical_documents(self, valid_settings):
        result = diff_documents(valid_settings, json.loads(json.dumps(valid_settings)))
        assert not result.has_diff
        assert result.added == {}
        assert result.removed == {}
        assert result.changed == {}

    def test_added_removed_changed(self):
        a = {"keep": 1, "old": "x", "mod": "a"}
        b = {"keep": 1, "new": "y", "mod": "b"}
        result = diff_documents(a, b)

        assert result.added == {"new": "y"}
        assert result.removed == {"old": "x"}
        assert result.changed["mod"].from_value == "a"
        assert result.changed["mod"].to_value == "b"
        assert result.has_diff

    def test_nested_paths(self):
        a = {"env": {"KEY": "1", "URL": "u"}, "deep": {"a": {"b": {"c": 1}}}}
        b = {"env": {"KEY": "2", "MODEL": "m"}, "deep": {"a": {"b": {"c": 2}}}}
        result = diff_documents(a, b)

        assert result.added == {"env.MODEL": "m"}
        assert result.removed == {"env.URL": "u"}
        assert set(result.changed) == {"env.KEY", "deep.a.b.c"}

    def test_arrays_are_atomic(self):
        result = diff_documents({"allow": ["a", "b"]}, {"allow": ["a", "c"]})
        assert list(result.changed) == ["allow"]
        assert result.changed["allow"].to_value == ["a", "c"]

    def test_type_change_is_single_change(self):
        result = diff_documents({"proxy": {"host": "h"}}, {"proxy": "h"})
        assert result.changed["proxy"].from_value == {"host": "h"}
        assert result.added == {}

    def test_added_subtree_kept_whole(self):
        result = diff_documents({}, {"env": {"A": "1"}})
        assert result.added == {"env": {"A": "1"}}

    def test_summary_counts(self):
        result = diff_documents({"a": 1, "b": 2}, {"b": 3, "c": 4, "d": 5})
        summary = result.summary
        assert (summary.added, summary.removed, summary.changed) == (2, 1, 1)
        assert summary.total == 4

    def test_to_dict_shape(self):
        data = diff_documents({"a": 1}, {"a": 2}).to_dict()
        assert data["hasDiff"] is True
        assert data["differences"]["changed"] == {"a": {"from": 1, "to": 2}}
        assert data["summary"]["total"] == 1


class TestCompareFiles:
    def test_same_file(self, tmp_path, valid_settings):
        path = tmp_path / "a.json"
        path.write_text(json.dumps(valid_settings))
        assert not compare(path, path).has_diff

    def test_two_files(self, tmp_path):
        a = tmp_path / "a.json"
        b = tmp_path / "b.json"
        a.write_text('{"env": {"K": "1"}}')
        b.write_text('{"env": {"K": "2"}}')
        assert list(compare(a, b).changed) == ["env.K"]

    def test_missing_file(self, tmp_path):
        a = tmp_path / "a.json"
        a.write_text("{}")
        with pytest.raises(FileAccessError):
            compare(a, tmp_path / "b.json")

    def test_invalid_json(self, tmp_path):
        a = tmp_path / "a.json"
        b = tmp_path / "b.json"
        a.write_text("{}")
        b.write_text("{")
        with pytest.raises(DocumentFormatError):
            compare(a, b)

    def test_nan_document_rejected(self, tmp_path):
        a = tmp_path / "a.json"
        a.write_text('{"timeout": NaN}')
        with pytest.raises(DocumentFormatError):
            compare(a, a)
