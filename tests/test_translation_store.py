#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the thread-safe runtime string store."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from langkit.encoder import make_key
from langkit.translation_store import TranslationStore


class TestTranslationStore:
    def test_set_and_get(self):
        store = TranslationStore()
        store.set("Hello", "Ciao")
        assert store.try_get("Hello") == ("Ciao", True)

    def test_miss(self):
        store = TranslationStore()
        assert store.try_get("Hello") == (None, False)
        assert store.is_empty()

    def test_keys_are_hashed(self):
        store = TranslationStore()
        store.set("Hello", "Ciao")
        assert store.items() == [(make_key("Hello"), "Ciao")]

    def test_set_raw_upper_cases_key(self):
        store = TranslationStore()
        store.set_raw(make_key("Hello").lower(), "Ciao")
        assert store.try_get("Hello") == ("Ciao", True)
        assert "Hello" in store

    def test_replace_value(self):
        store = TranslationStore()
        store.set("Hello", "Ciao")
        store.set("Hello", "Salve")
        assert len(store) == 1
        assert store.try_get("Hello")[0] == "Salve"

    def test_clear(self):
        store = TranslationStore()
        store.set("a", "b")
        store.clear()
        assert store.is_empty()
        assert "a" not in store

    def test_replace_with_is_a_snapshot(self):
        source = TranslationStore()
        source.set("Hello", "Ciao")
        target = TranslationStore()
        target.set("Other", "Altro")

        target.replace_with(source)
        source.set("Hello", "Changed")

        assert target.try_get("Hello")[0] == "Ciao"
        assert "Other" not in target

    def test_contains_rejects_non_strings(self):
        assert 42 not in TranslationStore()

    def test_updating_blocks_readers(self):
        store = TranslationStore()
        store.set("key", "old")
        seen = []

        def reader():
            seen.append(store.try_get("key")[0])

        with store.updating():
            store.clear()
            thread = threading.Thread(target=reader)
            thread.start()
            thread.join(timeout=0.05)
            assert thread.is_alive()
            store.set("key", "new")
        thread.join()

        assert seen == ["new"]
