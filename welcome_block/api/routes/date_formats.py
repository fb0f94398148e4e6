"""
Catalogue des formats de date.

GET /admin/config/regional/date-time → liste HTML (cible du lien du formulaire bloc)
GET /api/date-formats                → liste JSON
GET /api/date-formats/samples        → valeur de chaque caractère de pattern (preview client)
"""
import html
import time

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...core.dates import DateFormatter
from ...core.entity import EntityTypeManager
from ...core.i18n import current_language
from ...database import get_db
from ...models import DateFormatOut
from ...renderer.html import render_page
from ..deps import check_admin

router = APIRouter(tags=["Date formats"])


@router.get("/admin/config/regional/date-time", response_class=HTMLResponse,
            dependencies=[Depends(check_admin)])
def date_format_collection(db: Session = Depends(get_db)):
    storage = EntityTypeManager(db).get_storage("date_format")
    formatter = DateFormatter(storage)
    now = time.time()
    rows = "".join(
        f"<tr><td>{html.escape(f.label)}</td><td><code>{html.escape(f.pattern)}</code></td>"
        f"<td>{html.escape(formatter.format(now, fid))}</td></tr>"
        for fid, f in storage.load_multiple().items()
    )
    body = f"""<h1>Date and time formats</h1>
<table><tr><th>Name</th><th>Pattern</th><th>Example</th></tr>
{rows or '<tr><td colspan=3>Aucun format</td></tr>'}
</table>"""
    return HTMLResponse(render_page("Date and time formats", body, lang=current_language()))


@router.get("/api/date-formats")
def date_format_list(db: Session = Depends(get_db)):
    storage = EntityTypeManager(db).get_storage("date_format")
    return [DateFormatOut.model_validate(f, from_attributes=True).model_dump()
            for f in storage.load_multiple().values()]


@router.get("/api/date-formats/samples")
def date_format_samples(db: Session = Depends(get_db)):
    storage = EntityTypeManager(db).get_storage("date_format")
    return DateFormatter(storage).get_sample_date_formats()
