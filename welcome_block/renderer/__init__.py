from .html import render_build, render_form, render_page, render_welcome_message

__all__ = ["render_build", "render_form", "render_page", "render_welcome_message"]
