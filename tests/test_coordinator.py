#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the per-container language coordinator.

Usage:
    python -m pytest tests/test_coordinator.py -v
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from langkit.coordinator import LanguageCoordinator
from langkit.encoder import make_key
from langkit.engines import EngineRegistry, IniCodec
from langkit.language_server import get_language_server
from langkit.language_types import ConfigurationError, PersistenceFormat
from sample_tree import build_form, find_node


def _write_ini(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


class TestFilePath:
    def test_resolved_from_root_and_language(self, tmp_path, server):
        coordinator = LanguageCoordinator(
            build_form(), server=server, root_path=tmp_path, language="it"
        )
        assert coordinator.file_path == str(tmp_path / "it" / "Form1.lng")

    def test_extension_follows_format(self, tmp_path, server):
        coordinator = LanguageCoordinator(
            build_form(),
            server=server,
            root_path=tmp_path,
            language="it",
            file_format=PersistenceFormat.INI_FLAT,
        )
        assert coordinator.file_path.endswith("Form1.clng")

        coordinator.file_format = PersistenceFormat.JSON
        assert coordinator.file_path == str(tmp_path / "it" / "Form1.json")
        assert coordinator.engine.file_format is PersistenceFormat.JSON

    def test_unresolved_without_language(self, tmp_path, server):
        coordinator = LanguageCoordinator(build_form(), server=server, root_path=tmp_path)
        assert coordinator.file_path == ""
        assert coordinator.load() is False

    def test_explicit_file_derives_language_and_root(self, tmp_path, server):
        path = tmp_path / "languages" / "de" / "Form1.lng"
        coordinator = LanguageCoordinator(build_form(), server=server, file_path=path)

        assert coordinator.language == "de"
        assert coordinator.root_path == str(tmp_path / "languages")
        assert coordinator.file_path == str(path)

    def test_root_or_language_change_replaces_explicit_file(self, tmp_path, server):
        explicit = tmp_path / "de" / "custom.lng"
        coordinator = LanguageCoordinator(build_form(), server=server, file_path=explicit)
        assert coordinator.file_path == str(explicit)

        coordinator.language = "it"
        assert coordinator.file_path == str(tmp_path / "it" / "Form1.lng")

        coordinator.file_path = explicit
        other_root = tmp_path / "other"
        coordinator.root_path = other_root
        assert coordinator.file_path == str(other_root / "de" / "Form1.lng")

    def test_empty_language_rejected(self, server):

        coordinator = LanguageCoordinator(build_form(), server=server)
        with pytest.raises(ConfigurationError, match="can not be empty"):
            coordinator.language = ""

    def test_defaults(self, server):
        coordinator = LanguageCoordinator(build_form(), server=server)
        assert coordinator.file_format is PersistenceFormat.INI
        assert coordinator.exclude_on_action is True
        assert coordinator.create_if_missing is False
        assert coordinator.register_on_start is True
        assert coordinator in server.clients


class TestLoading:
    def test_loads_existing_file_on_construction(self, tmp_path, server):
        _write_ini(tmp_path / "it" / "Form1.lng", "[Form1.Button1]\nCaption=Va bene\n")
        form = build_form()

        LanguageCoordinator(form, server=server, root_path=tmp_path, language="it")
        assert find_node(form, "Button1").caption == "Va bene"

    def test_language_change_reloads(self, tmp_path, server):
        _write_ini(tmp_path / "it" / "Form1.lng", "[Form1]\nCaption=Finestra\n")
        _write_ini(tmp_path / "de" / "Form1.lng", "[Form1]\nCaption=Fenster\n")
        form = build_form()
        coordinator = LanguageCoordinator(form, server=server, root_path=tmp_path, language="it")
        assert form.caption == "Finestra"

        coordinator.language = "de"
        assert form.caption == "Fenster"

    def test_missing_file_reported_through_hook(self, tmp_path, server):
        errors = []
        coordinator = LanguageCoordinator(
            build_form(),
            server=server,
            root_path=tmp_path,
            language="it",
            on_error=lambda source, message: errors.append((source, message)),
        )

        assert len(errors) == 1
        assert errors[0][0] is coordinator
        assert "Form1.lng" in errors[0][1]
        assert coordinator.load() is False
        assert len(errors) == 2

    def test_missing_file_auto_created(self, tmp_path, server):
        coordinator = LanguageCoordinator(
            build_form(),
            server=server,
            root_path=tmp_path,
            language="it",
            create_if_missing=True,
        )
        assert Path(coordinator.file_path).exists()

    def test_callbacks(self, tmp_path, server):
        path = _write_ini(tmp_path / "it" / "Form1.lng", "[Form1]\nCaption=Finestra\n")
        form = build_form()
        before = MagicMock(return_value=None)
        after = MagicMock()
        coordinator = LanguageCoordinator(form, server=server, before_load=before, after_load=after)

        coordinator.file_path = path

        before.assert_called_once_with(form, str(path))
        after.assert_called_once_with(form, str(path))
        assert form.caption == "Finestra"

    def test_before_load_can_cancel(self, tmp_path, server):
        _write_ini(tmp_path / "it" / "Form1.lng", "[Form1]\nCaption=Finestra\n")
        form = build_form()
        after = MagicMock()
        coordinator = LanguageCoordinator(
            form,
            server=server,
            root_path=tmp_path,
            language="it",
            before_load=lambda container, path: False,
            after_load=after,
        )

        assert coordinator.load() is False
        assert form.caption == "Main window"
        after.assert_not_called()

    def test_load_other_container(self, tmp_path, server):
        path = _write_ini(tmp_path / "it" / "Form1.lng", "[Form1]\nCaption=Finestra\n")
        coordinator = LanguageCoordinator(build_form(), server=server)
        other = build_form()

        assert coordinator.load(other, path)
        assert other.caption == "Finestra"

    def test_option_changes_reach_engine(self, tmp_path, server):
        _write_ini(tmp_path / "it" / "Form1.lng", "[Form1.Button1]\nCaption=Va bene\n")
        form = build_form()
        ok = find_node(form, "Button1")
        ok.action = object()
        coordinator = LanguageCoordinator(form, server=server)
        coordinator.exclude_classes = ["Panel"]
        coordinator.exclude_attributes = ["Hint"]

        coordinator.load(file_path=tmp_path / "it" / "Form1.lng")
        assert ok.caption == "OK"

        coordinator.exclude_on_action = False
        coordinator.load(file_path=tmp_path / "it" / "Form1.lng")
        assert ok.caption == "Va bene"
        assert coordinator.engine.options.exclude_classes == ["Panel"]
        assert coordinator.engine.options.exclude_attributes == ["Hint"]


class TestSaving:
    def test_save_and_reload(self, tmp_path, server):
        after = MagicMock()
        form = build_form()
        coordinator = LanguageCoordinator(
            form,
            server=server,
            root_path=tmp_path,
            language="it",
            create_if_missing=True,
            file_format=PersistenceFormat.JSON,
            after_save=after,
        )
        find_node(form, "Button1").caption = "Changed"

        assert coordinator.save()
        after.assert_called_once_with(form, coordinator.file_path)
        document = json.loads(Path(coordinator.file_path).read_text(encoding="utf-8"))
        assert document["Form1"]["Button1"]["Caption"] == "Changed"

    def test_before_save_can_cancel(self, tmp_path, server):
        coordinator = LanguageCoordinator(
            build_form(),
            server=server,
            root_path=tmp_path,
            language="it",
            before_save=lambda container, path: False,
        )
        (tmp_path / "it").mkdir()

        assert coordinator.save() is False
        assert not Path(coordinator.file_path).exists()

    def test_save_without_file_raises(self, server):
        coordinator = LanguageCoordinator(build_form(), server=server)
        with pytest.raises(ConfigurationError, match="No Language file selected"):
            coordinator.save()


class TestEngineAvailability:
    def test_unregistered_format_reported_on_load(self, tmp_path):
        registry = EngineRegistry()
        registry.register(PersistenceFormat.INI, IniCodec)
        server = MagicMock()
        errors = []

        coordinator = LanguageCoordinator(
            build_form(),
            server=server,
            registry=registry,
            file_format=PersistenceFormat.JSON,
            root_path=tmp_path,
            language="it",
            on_error=lambda source, message: errors.append(message),
        )

        assert coordinator.engine is None
        assert errors == ["Engine not implemented."]

        coordinator.file_format = PersistenceFormat.INI
        assert coordinator.engine is not None


class TestTranslate:
    def test_local_then_server_then_text(self, tmp_path, server):
        _write_ini(
            tmp_path / "it" / "Form1.lng",
            f"[strings]\n{make_key('Hello')}=Ciao\n",
        )
        server.store.set("World", "Mondo")
        server.store.set("Hello", "Salve")
        coordinator = LanguageCoordinator(
            build_form(), server=server, root_path=tmp_path, language="it"
        )

        assert coordinator.translate("Hello") == "Ciao"
        assert coordinator.translate("World") == "Mondo"
        assert coordinator.translate("Unknown") == "Unknown"
        assert coordinator.translate("") == ""

    def test_uses_default_server(self):
        coordinator = LanguageCoordinator(build_form())
        assert coordinator.server is get_language_server()
        assert coordinator in get_language_server().clients


class TestRegistration:
    def test_close_unregisters(self, server):
        coordinator = LanguageCoordinator(build_form(), server=server)
        coordinator.close()
        assert coordinator not in server.clients

    def test_register_on_start_off(self, server):
        coordinator = LanguageCoordinator(build_form(), server=server, register_on_start=False)
        assert coordinator not in server.clients
