"""
Anti-copy layer injected into the course pages.

Blocks a fixed set of keyboard shortcuts, the context menu, and text
selection / drag outside form fields, and overlays the reader's identity as a
watermark. Any reader can disable it (it runs in their browser); it only
discourages casual copying.

The rules live here as data so the browser handler and the tests share them.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Optional

from src.utils.settings import ProtectionSettings

FORM_TAGS = ("input", "textarea", "select")


@dataclass(frozen=True)
class KeyEvent:
    """The parts of a browser ``keydown`` event the rules look at."""
    key: str
    ctrl: bool = False
    shift: bool = False
    target: str = "body"  # tag name of the event target


@dataclass(frozen=True)
class Decision:
    block: bool
    notify: bool = False


@dataclass(frozen=True)
class ShortcutRule:
    key: str  # compared case-insensitively
    ctrl: bool = True
    shift: bool = False
    notify: bool = False
    outside_forms_only: bool = False


BLOCKED_SHORTCUTS = (
    ShortcutRule("s", notify=True),            # save
    ShortcutRule("u", notify=True),            # view source
    ShortcutRule("p", notify=True),            # print
    ShortcutRule("i", shift=True),             # devtools
    ShortcutRule("j", shift=True),             # console
    ShortcutRule("c", shift=True),             # inspect element
    ShortcutRule("f12", ctrl=False),
    ShortcutRule("a"),                         # select all
    ShortcutRule("c", outside_forms_only=True),  # copy
)

ALLOW = Decision(block=False)


def is_form_element(tag: str) -> bool:
    return tag.lower() in FORM_TAGS


def _matches(rule: ShortcutRule, event: KeyEvent) -> bool:
    if event.key.lower() != rule.key:
        return False
    if rule.ctrl and (not event.ctrl or rule.shift != event.shift):
        return False
    if rule.outside_forms_only and is_form_element(event.target):
        return False
    return True


def should_block(event: KeyEvent) -> Decision:
    """First matching rule wins; unmatched keys pass through."""
    for rule in BLOCKED_SHORTCUTS:
        if _matches(rule, event):
            return Decision(block=True, notify=rule.notify)
    return ALLOW


def should_block_pointer(kind: str, target: str = "body") -> Decision:
    """Rules for ``contextmenu``, ``selectstart`` and ``dragstart``."""
    if kind == "contextmenu":
        return Decision(block=True, notify=True)
    if kind in ("selectstart", "dragstart"):
        return ALLOW if is_form_element(target) else Decision(block=True)
    return ALLOW


_SCRIPT = """
<script>
(function () {
  const doc = window.parent.document;
  const cfg = __CONFIG__;

  function isForm(el) {
    return !!el && !!el.tagName && cfg.formTags.indexOf(el.tagName.toLowerCase()) !== -1;
  }

  function notify() {
    let n = doc.getElementById('cm-protection-notification');
    if (!n) {
      n = doc.createElement('div');
      n.id = 'cm-protection-notification';
      n.style.cssText = 'position:fixed;top:20px;left:50%;transform:translateX(-50%);' +
        'background:linear-gradient(135deg,#c00,#900);color:#fff;padding:15px 30px;' +
        'border-radius:10px;font-size:14px;font-weight:500;z-index:10000;' +
        'box-shadow:0 10px 40px rgba(0,0,0,0.3);opacity:0;transition:opacity 0.3s;' +
        'pointer-events:none;';
      doc.body.appendChild(n);
    }
    n.textContent = '\\uD83D\\uDD12 ' + cfg.message;
    n.style.opacity = '1';
    clearTimeout(n._cmTimer);
    n._cmTimer = setTimeout(function () { n.style.opacity = '0'; }, cfg.durationMs);
  }

  function matches(rule, e) {
    if (e.key.toLowerCase() !== rule.key) return false;
    if (rule.ctrl && !e.ctrlKey) return false;
    if (rule.ctrl && rule.shift !== e.shiftKey) return false;
    if (rule.outside_forms_only && isForm(e.target)) return false;
    return true;
  }

  if (!window.parent.__cmProtection) {
    window.parent.__cmProtection = true;

    doc.addEventListener('keydown', function (e) {
      if (!e.key) return;
      for (const rule of cfg.rules) {
        if (matches(rule, e)) {
          e.preventDefault();
          if (rule.notify) notify();
          return;
        }
      }
    }, true);
    doc.addEventListener('contextmenu', function (e) { e.preventDefault(); notify(); }, true);
    doc.addEventListener('selectstart', function (e) { if (!isForm(e.target)) e.preventDefault(); }, true);
    doc.addEventListener('dragstart', function (e) { if (!isForm(e.target)) e.preventDefault(); }, true);

    const style = doc.createElement('style');
    style.textContent = 'body{-webkit-user-select:none;user-select:none;}' +
      'input,textarea,select{-webkit-user-select:text;user-select:text;}';
    doc.head.appendChild(style);
  }

  let wm = doc.getElementById('cm-watermark');
  if (!cfg.watermark) {
    if (wm) wm.remove();
    return;
  }
  if (!wm) {
    wm = doc.createElement('div');
    wm.id = 'cm-watermark';
    wm.style.cssText = 'position:fixed;bottom:10px;right:10px;' +
      'background:rgba(45,90,138,0.1);color:rgba(45,90,138,0.5);padding:5px 10px;' +
      'border-radius:5px;font-size:11px;pointer-events:none;z-index:9999;';
    doc.body.appendChild(wm);
  }
  wm.textContent = cfg.watermark;
})();
</script>
"""


def build_protection_html(watermark: str, settings: Optional[ProtectionSettings] = None) -> str:
    """Script to render with ``st.iframe`` in a 1 px frame."""
    settings = settings or ProtectionSettings()
    config = {
        "rules": [asdict(rule) for rule in BLOCKED_SHORTCUTS],
        "formTags": list(FORM_TAGS),
        "message": settings.notification_text,
        "durationMs": settings.notification_ms,
        "watermark": watermark,
    }
    # keep user text from closing the script element
    payload = json.dumps(config, ensure_ascii=False).replace("</", "<\\/")
    return _SCRIPT.replace("__CONFIG__", payload)
