"""
i18n : traduction des chaînes d'interface.

Chaîne source → texte localisé via i18n/{lang}.json (clé = chaîne source)
Chaîne absente du catalogue → retournée telle quelle
Placeholders :
  @name → valeur échappée
  %name → valeur échappée dans <em class="placeholder">
  :name → URL échappée
"""
import html
import json
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import quote

_I18N_CACHE: dict = {}
_I18N_DIR = Path(__file__).parent.parent / "i18n"


def current_language() -> str:
    return os.getenv("SITE_LANGUAGE", "en")


def _load_lang(lang: str) -> dict:
    """Charge le fichier i18n/{lang}.json (lazy, mis en cache)."""
    if lang not in _I18N_CACHE:
        path = _I18N_DIR / f"{lang}.json"
        if path.exists():
            with open(path, encoding="utf-8") as f:
                _I18N_CACHE[lang] = json.load(f)
        else:
            _I18N_CACHE[lang] = {}
    return _I18N_CACHE[lang]


def translate(text: str, lang: Optional[str] = None) -> str:
    if not text:
        return text
    catalog = _load_lang(lang or current_language())
    return catalog.get(text, text)


def _safe_url(value: str) -> str:
    return html.escape(quote(str(value), safe="/:?&=#%@+,;~-._"))


def format_placeholders(text: str, args: Optional[dict] = None) -> str:
    """
    Remplace @name, %name et :name par les valeurs de args.
    Les placeholders sans correspondance sont laissés intacts.
    """
    if not args or not text:
        return text

    def replacer(match):
        key = match.group(0)
        if key not in args:
            return key
        value = args[key]
        if key[0] == "@":
            return html.escape(str(value))
        if key[0] == "%":
            return f'<em class="placeholder">{html.escape(str(value))}</em>'
        return _safe_url(value)

    return re.sub(r"[@%:]\w+", replacer, text)


def t(text: str, args: Optional[dict] = None, lang: Optional[str] = None) -> str:
    """
    Pipeline complet : traduction → placeholders.
    Usage : t("Displayed as %date_format", {"%date_format": ""})
    """
    return format_placeholders(translate(text, lang), args)


def reload_cache():
    """Force le rechargement du cache i18n (utile en dev)."""
    _I18N_CACHE.clear()
