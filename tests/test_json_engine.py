#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for structured (JSON) language files."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from langkit.encoder import make_key
from langkit.engines import EngineOptions, JsonCodec, TranslationEngine
from langkit.language_types import DomainError
from langkit.translation_store import TranslationStore
from sample_tree import build_form, find_node


def _save(tmp_path: Path, form=None, **options) -> dict:
    path = tmp_path / "Form1.json"
    engine = TranslationEngine(JsonCodec(), EngineOptions(**options))
    assert engine.save(form or build_form(), path).success
    return json.loads(path.read_text(encoding="utf-8"))


class TestJsonSave:
    def test_nested_document(self, tmp_path):
        document = _save(tmp_path)
        form = document["Form1"]

        assert form["Caption"] == "Main window"
        assert form["Button1"] == {"Caption": "OK", "Hint": "Confirm"}
        assert form["Panel1"] == {"Button2": {"Caption": "Cancel", "Hint": ""}}

    def test_list_attribute(self, tmp_path):
        form = build_form()
        find_node(form, "ListBox1").items = ["One", "Two§Three", "Four\nFive"]
        document = _save(tmp_path, form)

        items = document["Form1"]["ListBox1"]["Items"]["Text"]
        assert items == "One§Two[§]Three§Four[LF]Five"

    def test_empty_list_items_marked_with_count(self, tmp_path):
        form = build_form()
        find_node(form, "ListBox1").items = [""]
        document = _save(tmp_path, form)
        assert document["Form1"]["ListBox1"]["Items"] == {"Text": "", "Count": 1}

    def test_object_attribute(self, tmp_path):

        document = _save(tmp_path)
        assert document["Form1"]["Label1"]["Font"] == {"Family": "Arial"}

    def test_multiline_value_kept(self, tmp_path):
        form = build_form()
        form.caption = "first\nsecond"
        assert _save(tmp_path, form)["Form1"]["Caption"] == "first\nsecond"

    def test_excluded_attribute(self, tmp_path):
        document = _save(tmp_path, exclude_attributes=["Hint", "Items"])
        assert "Hint" not in document["Form1"]["Button1"]
        assert "Items" not in document["Form1"]["ListBox1"]

    def test_merges_into_existing_file(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(
            json.dumps({"Strings": {make_key("Loaded"): "Caricato"}, "Other": {"Caption": "x"}}),
            encoding="utf-8",
        )

        TranslationEngine(JsonCodec()).save(build_form(), path)
        document = json.loads(path.read_text(encoding="utf-8"))

        assert document["Strings"] == {make_key("Loaded"): "Caricato"}
        assert document["Other"] == {"Caption": "x"}
        assert document["Form1"]["Button1"]["Caption"] == "OK"


class TestJsonLoad:
    def test_end_to_end(self, tmp_path):
        path = tmp_path / "Form1.json"
        engine = TranslationEngine(JsonCodec())
        engine.save(build_form(), path)

        document = json.loads(path.read_text(encoding="utf-8"))
        document["Form1"]["Button1"]["Caption"] = "Va bene"
        document["Form1"]["Panel1"]["Button2"]["Caption"] = "Annulla"
        document["Form1"]["ListBox1"]["Items"]["Text"] = "Uno§Due[§]Tre"
        document["Form1"]["Label1"]["Font"]["Family"] = "Verdana"
        path.write_text(json.dumps(document), encoding="utf-8")

        form = build_form()
        assert engine.load(form, path).success
        assert find_node(form, "Button1").caption == "Va bene"
        assert find_node(form, "Button2").caption == "Annulla"
        assert find_node(form, "ListBox1").items == ["Uno", "Due§Tre"]
        assert find_node(form, "Label1").font.family == "Verdana"

    def test_runtime_strings(self, tmp_path):
        path = tmp_path / "runtime.json"
        path.write_text(json.dumps({"Strings": {make_key("Loaded"): "Caricato"}}), encoding="utf-8")
        store = TranslationStore()
        engine = TranslationEngine(JsonCodec())

        assert engine.load(None, path, store).success
        assert store.try_get("Loaded") == ("Caricato", True)
        assert engine.translate("Loaded") == "Caricato"

    def test_qualified_key(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(json.dumps({"Form1.Panel1.Button2": {"Caption": "Annulla"}}), encoding="utf-8")

        form = build_form()
        TranslationEngine(JsonCodec()).load(form, path)
        assert find_node(form, "Button2").caption == "Annulla"

    def test_moved_child_found_by_name(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(json.dumps({"Form1": {"Button2": {"Caption": "Annulla"}}}), encoding="utf-8")

        form = build_form()
        TranslationEngine(JsonCodec()).load(form, path)
        assert find_node(form, "Button2").caption == "Annulla"

    def test_action_values_not_overwritten(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(
            json.dumps({"Form1": {"Button1": {"Caption": "Va bene", "Hint": "Conferma"}}}),
            encoding="utf-8",
        )
        form = build_form()
        ok = find_node(form, "Button1")
        ok.action = object()

        TranslationEngine(JsonCodec(), EngineOptions(exclude_on_action=True)).load(form, path)
        assert ok.caption == "OK"
        assert ok.hint == "Confirm"

    def test_action_values_overwritten_when_option_off(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(
            json.dumps({"Form1": {"Button1": {"Caption": "Va bene", "Hint": "Conferma"}}}),
            encoding="utf-8",
        )
        form = build_form()
        ok = find_node(form, "Button1")
        ok.action = object()

        assert TranslationEngine(JsonCodec(), EngineOptions(exclude_on_action=False)).load(form, path).success
        assert ok.caption == "Va bene"
        assert ok.hint == "Conferma"

    @pytest.mark.parametrize("items", [[], [""], ["", ""], ["One"]])
    def test_list_length_survives_reload(self, tmp_path, items):
        form = build_form()
        find_node(form, "ListBox1").items = list(items)
        path = tmp_path / "Form1.json"
        engine = TranslationEngine(JsonCodec())
        assert engine.save(form, path).success

        reloaded = build_form()
        assert engine.load(reloaded, path).success
        assert find_node(reloaded, "ListBox1").items == items

    def test_empty_text_without_count_is_empty_list(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text(json.dumps({"Form1": {"ListBox1": {"Items": {"Text": ""}}}}), encoding="utf-8")
        form = build_form()

        assert TranslationEngine(JsonCodec()).load(form, path).success
        assert find_node(form, "ListBox1").items == []

    def test_wrong_value_types_ignored(self, tmp_path):

        path = tmp_path / "Form1.json"
        path.write_text(
            json.dumps({"Form1": {"Caption": ["not", "text"], "ListBox1": {"Items": "flat"}}}),
            encoding="utf-8",
        )
        form = build_form()

        assert TranslationEngine(JsonCodec()).load(form, path).success
        assert form.caption == "Main window"
        assert find_node(form, "ListBox1").items == ["One", "Two"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text("", encoding="utf-8")
        assert TranslationEngine(JsonCodec()).load(build_form(), path).success

    def test_non_object_document_is_domain_error(self, tmp_path):
        path = tmp_path / "Form1.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        result = TranslationEngine(JsonCodec()).load(build_form(), path)
        assert not result.success
        assert isinstance(result.error, DomainError)

    def test_auto_create(self, tmp_path):
        path = tmp_path / "it" / "Form1.json"
        engine = TranslationEngine(JsonCodec(), EngineOptions(create_if_missing=True))

        assert engine.load(build_form(), path).success
        assert json.loads(path.read_text(encoding="utf-8"))["Form1"]["Caption"] == "Main window"
