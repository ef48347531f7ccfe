"""Keyboard and pointer rules of the anti-copy layer."""

import json
import re
from pathlib import Path

import pytest

from src.auth import SessionStore, page_watermark
from src.auth.gate import LOGIN_PAGE
from src.ui.protection import (
    BLOCKED_SHORTCUTS, KeyEvent, build_protection_html, should_block, should_block_pointer,
)
from src.utils.settings import ProtectionSettings


class TestShortcuts:

    @pytest.mark.parametrize("key", ["s", "S", "u", "p"])
    def test_save_source_print_notify(self, key):
        decision = should_block(KeyEvent(key, ctrl=True))
        assert decision.block
        assert decision.notify

    @pytest.mark.parametrize("key", ["I", "J", "C"])
    def test_devtools_blocked_silently(self, key):
        decision = should_block(KeyEvent(key, ctrl=True, shift=True))
        assert decision.block
        assert not decision.notify

    def test_f12_without_modifier(self):
        assert should_block(KeyEvent("F12")).block
        assert should_block(KeyEvent("F12", ctrl=True)).block

    def test_copy_allowed_in_form_fields(self):
        assert not should_block(KeyEvent("c", ctrl=True, target="INPUT")).block
        assert not should_block(KeyEvent("c", ctrl=True, target="textarea")).block
        assert should_block(KeyEvent("c", ctrl=True, target="div")).block

    def test_select_all_blocked_everywhere(self):
        assert should_block(KeyEvent("a", ctrl=True)).block
        assert should_block(KeyEvent("a", ctrl=True, target="input")).block

    @pytest.mark.parametrize("event", [
        KeyEvent("s"),
        KeyEvent("v", ctrl=True),
        KeyEvent("i", ctrl=True),
        KeyEvent("s", ctrl=True, shift=True),
        KeyEvent("Enter"),
    ])
    def test_other_keys_pass(self, event):
        assert not should_block(event).block

    def test_rules_are_lowercase(self):
        assert all(rule.key == rule.key.lower() for rule in BLOCKED_SHORTCUTS)


class TestPointer:

    def test_context_menu(self):
        decision = should_block_pointer("contextmenu", "input")
        assert decision.block and decision.notify

    @pytest.mark.parametrize("kind", ["selectstart", "dragstart"])
    def test_selection_outside_forms(self, kind):
        assert should_block_pointer(kind, "p").block
        assert not should_block_pointer(kind, "select").block

    def test_unknown_event(self):
        assert not should_block_pointer("click").block


class TestScript:

    def _config(self, html):
        start = html.index("const cfg = ") + len("const cfg = ")
        end = html.index(";\n", start)
        return json.loads(html[start:end])

    def test_watermark_and_settings(self):
        settings = ProtectionSettings(notification_text="Interdit", notification_ms=500)
        html = build_protection_html("Marie Dupont - marie@esup.fr", settings)
        config = self._config(html)
        assert config["watermark"] == "Marie Dupont - marie@esup.fr"
        assert config["message"] == "Interdit"
        assert config["durationMs"] == 500
        assert len(config["rules"]) == len(BLOCKED_SHORTCUTS)
        assert html.strip().startswith("<script>")

    def test_user_text_cannot_close_script(self):
        html = build_protection_html("</script><b>x</b>")
        assert html.count("</script>") == 1
        assert "<\\/script>" in html

    def test_login_page_clears_watermark(self, clock):
        record = SessionStore({}, clock=clock).save("Dupont", "Marie", "marie@esup.fr")
        html = build_protection_html(page_watermark(LOGIN_PAGE, record))
        config = self._config(html)
        assert config["watermark"] == ""
        assert len(config["rules"]) == len(BLOCKED_SHORTCUTS)
        assert "remove()" in html


class TestStreamlitApi:

    ROOT = Path(__file__).resolve().parent.parent

    def _app_sources(self):
        files = [self.ROOT / "app.py", *sorted((self.ROOT / "src" / "ui").glob("*.py"))]
        return {path.name: path.read_text(encoding="utf-8") for path in files}

    @pytest.mark.parametrize("call", ["components.v1", "components.html", "use_container_width"])
    def test_no_deprecated_calls(self, call):
        assert [name for name, text in self._app_sources().items() if call in text] == []

    def test_streamlit_version_bounded(self):
        pyproject = (self.ROOT / "pyproject.toml").read_text(encoding="utf-8")
        assert re.search(r'"streamlit>=1\.65,<2"', pyproject)
