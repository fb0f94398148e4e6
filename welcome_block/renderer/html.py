"""
Renderer HTML : thèmes des blocs, formulaire admin, page complète.
Dispatch : BlockBuild.theme → fonction de rendu.
"""
import html
import json
from typing import Callable, Dict, Optional

from ..core.forms import FormField, FormSpec
from ..models import BlockBuild, RenderViewModel

_esc = html.escape


# ── Point d'entrée public ───────────────────────────────────────────────────

def render_page(title: str, body: str, extra_head: str = "", lang: str = "en") -> str:
    """Génère le HTML complet d'une page."""
    return f"""<!DOCTYPE html>
<html lang="{_esc(lang)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{_esc(title)}</title>
  <style>{_CSS}</style>
  {extra_head}
</head>
<body>
<main class="container">
{body}
</main>
</body>
</html>"""


def render_build(build: BlockBuild, block_id: str = "") -> str:
    """Dispatch vers le thème déclaré par le bloc."""
    renderer = THEMES.get(build.theme)
    if renderer is None:
        return f"<!-- Thème non implémenté : {_esc(build.theme)} -->"
    inner = renderer(build.variables)
    id_attr = f' id="block-{_esc(block_id)}"' if block_id else ""
    return f'<div{id_attr} class="block">\n{inner}\n</div>'


# ── Thèmes ──────────────────────────────────────────────────────────────────

def render_welcome_message(vm: RenderViewModel) -> str:
    return f"""<div class="welcome-message">
  <p class="welcome-message__text">{_esc(vm.welcome_message)}</p>
  <p class="welcome-message__user">{_esc(vm.username)}</p>
  <p class="welcome-message__last-login">{_esc(vm.last_login_date)}</p>
  <a class="welcome-message__link" href="{_esc(vm.link.url)}">{_esc(vm.link.text)}</a>
</div>"""


THEMES: Dict[str, Callable[[RenderViewModel], str]] = {
    "welcome_message": render_welcome_message,
}


# ── Formulaire ──────────────────────────────────────────────────────────────

def _states_attr(f: FormField) -> str:
    if not f.states:
        return ""
    payload = {state: cond.model_dump() for state, cond in f.states.items()}
    return f" data-states='{_esc(json.dumps(payload), quote=True)}'"


def render_field(f: FormField, value: str, error: str = "") -> str:
    req = " required" if f.required else ""
    attrs = "".join(f' {_esc(k)}="{_esc(v)}"' for k, v in f.attributes.items())
    if f.type == "textarea":
        widget = f'<textarea name="{f.name}" id="edit-{f.name}" rows="4"{req}{attrs}>{_esc(value)}</textarea>'
    elif f.type == "select":
        opts = "".join(
            f'<option value="{_esc(k)}"{" selected" if k == value else ""}>{_esc(label)}</option>'
            for k, label in f.options.items()
        )
        widget = f'<select name="{f.name}" id="edit-{f.name}"{req}{attrs}>{opts}</select>'
    else:
        widget = f'<input type="text" name="{f.name}" id="edit-{f.name}" value="{_esc(value)}"{req}{attrs}>'

    # description + suffix : HTML produit par t(), placeholders déjà échappés
    desc = f'<div class="description">{f.description}</div>' if f.description else ""
    err = f'<div class="error">{_esc(error)}</div>' if error else ""
    return f"""<div class="form-item form-item--{f.type}"{_states_attr(f)}>
  <label for="edit-{f.name}">{_esc(f.title)}</label>
  {widget}{f.field_suffix}
  {desc}{err}
</div>"""


def render_form(form: FormSpec, action: str, values: Optional[dict] = None,
                errors: Optional[dict] = None, submit_label: str = "Save block") -> str:
    values = values or {}
    errors = errors or {}
    fields_html = "\n".join(
        render_field(f, str(values.get(f.name, f.default_value) or ""), errors.get(f.name, ""))
        for f in form.fields
    )
    settings = json.dumps(form.attached.settings, ensure_ascii=False).replace("</", "<\\/")
    scripts = "".join(f'<script src="{_esc(src)}"></script>' for src in form.attached.libraries)
    return f"""<form method="POST" action="{_esc(action)}" class="block-form">
{fields_html}
  <button class="btn" type="submit">{_esc(submit_label)}</button>
</form>
<script>window.appSettings = {settings};</script>
{scripts}"""


_CSS = """
*{box-sizing:border-box}
body{font-family:'Segoe UI',sans-serif;background:#f9fafb;color:#1f2937;margin:0}
.container{max-width:760px;margin:0 auto;padding:32px 20px}
.block{background:#fff;border:1px solid #e5e7eb;border-radius:10px;padding:24px;margin-bottom:20px}
.welcome-message__text{font-size:1.2rem;font-weight:bold;margin:0 0 8px}
.welcome-message__user,.welcome-message__last-login{color:#4b5563;margin:0 0 6px}
.welcome-message__link{color:#e94560}
.form-item{margin-bottom:18px}
.form-item label{display:block;font-weight:600;margin-bottom:6px}
.form-item input,.form-item select,.form-item textarea{width:100%;padding:8px 10px;
  border:1px solid #d1d5db;border-radius:6px;font:inherit}
.description{color:#6b7280;font-size:13px;margin-top:4px}
.error{color:#e94560;font-size:13px;margin-top:4px}
.js-hide{display:none}
.btn{background:#e94560;color:#fff;border:none;padding:10px 18px;border-radius:6px;cursor:pointer}
"""
