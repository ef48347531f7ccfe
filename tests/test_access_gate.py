"""Allow-list, session record and login gate."""

import datetime as dt
from urllib.parse import quote, unquote

import pytest

from src.auth import (
    AccessDenied, AccessGate, CookieStorage, SessionStore, build_session_store,
    decode_allow_list, encode_allow_list, is_authorized, page_watermark, redirect_path,
    watermark_text,
)
from src.auth.gate import LOGIN_PAGE
from src.utils.settings import AccessSettings

# "admin@esup.fr,@esup.fr"
ESUP_ALLOW_LIST = "YWRtaW5AZXN1cC5mcixAZXN1cC5mcg=="


class TestAllowList:

    def test_decode(self):
        assert decode_allow_list(ESUP_ALLOW_LIST) == ["admin@esup.fr", "@esup.fr"]

    def test_decode_trims_lowercases_and_drops_empties(self):
        # " Admin@Esup.fr ,, @esup.fr "
        encoded = "IEFkbWluQEVzdXAuZnIgLCwgQGVzdXAuZnIg"
        assert decode_allow_list(encoded) == ["admin@esup.fr", "@esup.fr"]

    def test_encode_is_inverse(self):
        assert encode_allow_list(["admin@esup.fr", "@esup.fr"]) == ESUP_ALLOW_LIST

    def test_corrupt_payload_fails_open(self, caplog):
        assert decode_allow_list("not base64 !!") == []
        assert "Could not decode" in caplog.text

    def test_empty_payload(self):
        assert decode_allow_list("") == []

    @pytest.mark.parametrize("email, expected", [
        ("admin@esup.fr", True),
        ("  ADMIN@esup.FR ", True),
        ("prof@esup.fr", True),
        ("someone@other.com", False),
        ("esup.fr@other.com", False),
    ])
    def test_matching(self, email, expected):
        allow_list = decode_allow_list(ESUP_ALLOW_LIST)
        assert is_authorized(email, allow_list) is expected

    def test_empty_list_accepts_anyone(self):
        assert is_authorized("anyone@anywhere.org", [])


class TestSessionStore:

    @pytest.fixture
    def store(self, clock):
        return SessionStore({}, clock=clock)

    def test_save_and_load(self, store, clock):
        record = store.save("Dupont", "Marie", "Marie.Dupont@esup.fr")
        assert record.email == "marie.dupont@esup.fr"
        assert record.expires_at - record.created_at == dt.timedelta(days=7)
        assert store.load() == record
        assert store.is_authenticated()

    def test_valid_until_expiry_inclusive(self, store, clock):
        store.save("Dupont", "Marie", "marie@esup.fr")
        clock.advance(days=7)
        assert store.is_authenticated()

    def test_expired_session_is_removed(self, store, clock):
        store.save("Dupont", "Marie", "marie@esup.fr")
        clock.advance(days=7, seconds=1)
        assert store.load() is None
        assert store.key not in store.storage

    def test_corrupt_data_is_removed(self, store):
        store.storage[store.key] = "{not json"
        assert store.load() is None
        assert store.key not in store.storage

    def test_clear(self, store):
        store.save("Dupont", "Marie", "marie@esup.fr")
        store.clear()
        assert not store.is_authenticated()
        store.clear()

    def test_login_overwrites_previous_session(self, store, clock):
        store.save("Dupont", "Marie", "marie@esup.fr")
        clock.advance(days=3)
        record = store.save("Martin", "Paul", "paul@esup.fr")
        assert store.load() == record
        assert record.expires_at == clock() + dt.timedelta(days=7)

    def test_duration_from_settings(self, clock):
        settings = AccessSettings(session_key="k", session_duration_days=1)
        store = build_session_store({}, settings, clock)
        record = store.save("Dupont", "Marie", "marie@esup.fr")
        assert record.expires_at == clock() + dt.timedelta(days=1)
        assert "k" in store.storage


class TestAccessGate:

    @pytest.fixture
    def gate(self, clock):
        settings = AccessSettings(authorized_emails_encoded=ESUP_ALLOW_LIST)
        return AccessGate(settings, build_session_store({}, settings, clock))

    def test_login_accepted(self, gate):
        record = gate.login("Dupont", "Marie", "prof@esup.fr")
        assert gate.current_session() == record
        assert gate.require_session("cours/poutres/index.html") is None

    def test_login_refused(self, gate):
        with pytest.raises(AccessDenied, match="Accès refusé"):
            gate.login("Doe", "John", "someone@other.com")
        assert gate.current_session() is None

    @pytest.mark.parametrize("name, first_name, email", [
        ("", "Marie", "prof@esup.fr"),
        ("Dupont", "  ", "prof@esup.fr"),
        ("Dupont", "Marie", ""),
    ])
    def test_missing_field(self, gate, name, first_name, email):
        with pytest.raises(AccessDenied, match="remplir tous les champs"):
            gate.login(name, first_name, email)

    def test_invalid_email(self, gate):
        with pytest.raises(AccessDenied, match="invalide"):
            gate.login("Dupont", "Marie", "prof.esup.fr")

    def test_logout(self, gate):
        gate.login("Dupont", "Marie", "prof@esup.fr")
        gate.logout()
        assert gate.require_session("accueil.html") == "index.html"

    def test_guard_after_expiry(self, gate, clock):
        gate.login("Dupont", "Marie", "prof@esup.fr")
        clock.advance(days=8)
        assert gate.require_session("cours/planchers/index.html") == "../../index.html"

    def test_open_gate_with_empty_list(self, clock):
        settings = AccessSettings()
        gate = AccessGate(settings, build_session_store({}, settings, clock))
        assert gate.login("Doe", "John", "someone@other.com").email == "someone@other.com"


class FakeBrowser:
    """Cookie jar standing in for the browser side of the cookie component."""

    def __init__(self):
        self.jar = {}
        self.options = {}

    def get(self, name):
        value = self.jar.get(name)
        return None if value is None else unquote(value)

    def set(self, name, value, **options):
        self.jar[name] = quote(value, safe="")
        self.options[name] = options

    def remove(self, name):
        self.jar.pop(name, None)


class TestCookieSession:

    MAX_AGE = 7 * 86400

    @pytest.fixture
    def browser(self):
        return FakeBrowser()

    def _gate(self, browser, clock, pending=None):
        """Gate for one script run: cookies sent with the request plus session state."""
        settings = AccessSettings(authorized_emails_encoded=ESUP_ALLOW_LIST)
        storage = CookieStorage(dict(browser.jar), browser, {} if pending is None else pending,
                                max_age=self.MAX_AGE)
        storage.sync()
        return AccessGate(settings, build_session_store(storage, settings, clock))

    def test_session_survives_reload(self, browser, clock):
        record = self._gate(browser, clock).login("Dupont", "Marie", "prof@esup.fr")
        reloaded = self._gate(browser, clock)
        assert reloaded.current_session() == record
        assert reloaded.require_session("cours/poteaux/index.html") is None

    def test_cookie_lifetime(self, browser, clock):
        self._gate(browser, clock).login("Dupont", "Marie", "prof@esup.fr")
        assert browser.options["cm_session"]["max_age"] == self.MAX_AGE
        assert browser.options["cm_session"]["expires"] > dt.datetime.now()

    def test_login_visible_in_same_run(self, browser, clock):
        gate = self._gate(browser, clock)
        browser.jar.clear()
        record = gate.login("Dupont", "Marie", "prof@esup.fr")
        assert gate.current_session() == record

    def test_expired_cookie_removed_on_reload(self, browser, clock):
        self._gate(browser, clock).login("Dupont", "Marie", "prof@esup.fr")
        clock.advance(days=8)
        assert self._gate(browser, clock).current_session() is None
        assert "cm_session" not in browser.jar

    def test_logout_hides_request_cookie(self, browser, clock):
        self._gate(browser, clock).login("Dupont", "Marie", "prof@esup.fr")
        gate = self._gate(browser, clock)
        gate.logout()
        assert gate.current_session() is None
        assert "cm_session" not in browser.jar
        assert self._gate(browser, clock).current_session() is None

    def test_dropped_write_resent(self, browser, clock):
        pending = {}
        record = self._gate(browser, clock, pending).login("Dupont", "Marie", "prof@esup.fr")
        browser.jar.clear()
        # next run of the same browser session, the write was lost with the rerun
        self._gate(browser, clock, pending)
        assert self._gate(browser, clock).current_session() == record

    def test_percent_encoded_request_cookie(self, browser):
        storage = CookieStorage({"k": "%7B%22a%22%3A%201%7D"}, browser, {})
        assert storage["k"] == '{"a": 1}'
        assert list(storage) == ["k"]
        assert len(storage) == 1

    def test_delete_missing(self, browser):
        storage = CookieStorage({}, browser, {})
        with pytest.raises(KeyError):
            del storage["k"]


class TestRedirect:

    @pytest.mark.parametrize("current, expected", [
        ("cours/poutres/x.html", "../../index.html"),
        ("cours/x.html", "../index.html"),
        ("x.html", "index.html"),
        ("/cours/poteaux/", "../../index.html"),
    ])
    def test_relative_path(self, current, expected):
        assert redirect_path(current) == expected


class TestWatermark:

    def test_identity(self, gate_record):
        assert watermark_text(gate_record) == "Marie Dupont - marie@esup.fr"

    def test_no_session(self):
        assert watermark_text(None) == ""

    def test_login_page_has_no_identity(self, gate_record):
        assert page_watermark(LOGIN_PAGE, gate_record) == ""
        assert page_watermark("accueil.html", gate_record) == watermark_text(gate_record)


@pytest.fixture
def gate_record(clock):
    return SessionStore({}, clock=clock).save("Dupont", "Marie", "marie@esup.fr")
