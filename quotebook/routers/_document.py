from fastapi import Response
from fastapi.responses import HTMLResponse

from quotebook.services.documents import DocumentSnapshot
from quotebook.services.renderer import DocumentRenderer

renderer = DocumentRenderer()

DOCUMENT_FORMAT_PATTERN = "^(html|pdf)$"


def document_response(snapshot: DocumentSnapshot, fmt: str) -> Response:
    if fmt == "pdf":
        return Response(
            content=renderer.render_pdf(snapshot),
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'inline; filename="{snapshot.quotation_number}.pdf"'
            },
        )
    return HTMLResponse(renderer.render_html(snapshot))
