# quotebook/services/renderer.py
from pathlib import Path
from typing import Optional

import jinja2

from quotebook.core.settings import settings
from quotebook.services.documents import DocumentSnapshot

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

DEFAULT_TERMS = [
    "Quotation valid for {days} days from date of issue.",
    "50% advance payment required to commence work.",
    "Verify all dimensions and specifications on site.",
    "Timelines are subject to site readiness and payment schedules.",
]


def format_money(value) -> str:
    return f"Rs. {float(value or 0):.2f}"


def format_qty(value) -> str:
    return f"{float(value):g}" if value is not None else ""


class DocumentRenderer:
    """Renders a document snapshot to HTML (Jinja2) and PDF (WeasyPrint)."""

    def __init__(self, templates_dir: Optional[Path] = None, company_name: Optional[str] = None):
        self.templates_dir = Path(templates_dir or TEMPLATES_DIR)
        self.company_name = company_name or settings.COMPANY_NAME

        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
        )
        self.jinja_env.filters["money"] = format_money
        self.jinja_env.filters["qty"] = format_qty

    def render_html(self, snapshot: DocumentSnapshot) -> str:
        template = self.jinja_env.get_template("quotation.html")
        return template.render(
            doc=snapshot,
            company_name=self.company_name,
            title="POP Quotation" if snapshot.kind == "pop" else "Quotation",
            terms=[t.format(days=settings.QUOTATION_VALIDITY_DAYS) for t in DEFAULT_TERMS],
        )

    def render_pdf(self, snapshot: DocumentSnapshot) -> bytes:
        # imported here: weasyprint loads pango/cairo when imported
        from weasyprint import HTML

        html = self.render_html(snapshot)
        return HTML(string=html, base_url=str(self.templates_dir)).write_pdf()
