"""
Routes nommées → URLs + liens rendables.
"""
import html
from typing import Dict, Optional
from urllib.parse import quote

from ..models import LinkOut

ROUTES: Dict[str, str] = {
    "entity.user.canonical":         "/user/{user}",
    "entity.date_format.collection": "/admin/config/regional/date-time",
    "user.login":                    "/user/login",
    "user.logout":                   "/user/logout",
    "block.admin_form":              "/admin/structure/block/manage/{block}",
}


class Url:
    def __init__(self, route_name: str, params: Optional[dict] = None):
        if route_name not in ROUTES:
            raise ValueError(f"Route inconnue : {route_name!r}")
        self.route_name = route_name
        self.params = params or {}

    @classmethod
    def from_route(cls, route_name: str, params: Optional[dict] = None) -> "Url":
        return cls(route_name, params)

    def to_string(self) -> str:
        return ROUTES[self.route_name].format(
            **{k: quote(str(v), safe="") for k, v in self.params.items()}
        )


class Link:
    def __init__(self, text: str, url: Url):
        self.text = text
        self.url = url

    @classmethod
    def create_from_route(cls, text: str, route_name: str, params: Optional[dict] = None) -> "Link":
        return cls(text, Url.from_route(route_name, params))

    def to_renderable(self) -> LinkOut:
        return LinkOut(text=self.text, url=self.url.to_string())

    def to_html(self) -> str:
        return f'<a href="{html.escape(self.url.to_string())}">{html.escape(self.text)}</a>'
