"""Tests cache de rendu, i18n et routes nommées."""
import pytest

from welcome_block.core.cache import RenderCache, block_config_tag, cache_key, merge_contexts
from welcome_block.core.i18n import format_placeholders, t, translate
from welcome_block.core.links import Link, Url
from welcome_block.core.session import ANONYMOUS, Account


# ── Cache ────────────────────────────────────────────────────────────────────

def test_merge_contexts_dedup_sorted():
    assert merge_contexts(["user", "theme"], ["user"], []) == ["theme", "user"]


def test_cache_key_varies_by_user():
    alice, bob = Account(uid=1, name="alice"), Account(uid=2, name="bob")
    k1 = cache_key("welcome", ["user", "theme"], alice, "en", "default")
    k2 = cache_key("welcome", ["user", "theme"], bob, "en", "default")
    assert k1 != k2
    assert "user:1" in k1


def test_cache_key_without_user_context_shared():
    alice, bob = Account(uid=1, name="alice"), Account(uid=2, name="bob")
    assert cache_key("b", ["theme"], alice, "en", "t") == cache_key("b", ["theme"], bob, "en", "t")


def test_cache_key_roles_and_language():
    key = cache_key("b", ["user.roles", "languages:language_interface"], ANONYMOUS, "fr", "t")
    assert key == ("b", "languages:language_interface:fr", "user.roles:anonymous")


def test_unknown_context_rejected():
    with pytest.raises(ValueError):
        cache_key("b", ["url.query_args"], ANONYMOUS, "en", "t")


def test_render_cache_invalidate_by_tag():
    cache = RenderCache()
    cache.set(("a",), "<p>a</p>", [block_config_tag("a")])
    cache.set(("b",), "<p>b</p>", [block_config_tag("b")])
    assert cache.invalidate_tags([block_config_tag("a")]) == 1
    assert cache.get(("a",)) is None
    assert cache.get(("b",)) == "<p>b</p>"
    assert len(cache) == 1


# ── i18n ─────────────────────────────────────────────────────────────────────

def test_passthrough_untranslated():
    assert translate("Some text") == "Some text"


def test_passthrough_empty():
    assert t("") == ""


def test_french_catalog():
    assert translate("Visit your profile", lang="fr") == "Voir votre profil"


def test_unknown_lang_passthrough():
    assert translate("Visit your profile", lang="zz") == "Visit your profile"


def test_placeholder_escaped():
    assert format_placeholders("Hi @name", {"@name": "<b>x</b>"}) == "Hi &lt;b&gt;x&lt;/b&gt;"


def test_placeholder_emphasis():
    assert t("Displayed as %date_format", {"%date_format": "x"}) == 'Displayed as <em class="placeholder">x</em>'


def test_placeholder_url():
    assert format_placeholders("<a href=:url>", {":url": "/a b"}) == "<a href=/a%20b>"


def test_placeholder_missing_left_intact():
    assert format_placeholders("Hi @name", {"@other": "x"}) == "Hi @name"


# ── Liens ────────────────────────────────────────────────────────────────────

def test_profile_url():
    assert Url.from_route("entity.user.canonical", {"user": 42}).to_string() == "/user/42"


def test_unknown_route():
    with pytest.raises(ValueError):
        Url.from_route("nope")


def test_link_renderable_and_html():
    link = Link.create_from_route("Visit <your> profile", "entity.user.canonical", {"user": 1})
    assert link.to_renderable().url == "/user/1"
    assert link.to_html() == '<a href="/user/1">Visit &lt;your&gt; profile</a>'
