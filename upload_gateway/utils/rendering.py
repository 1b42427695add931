"""
HTML pages for browser users.
Upload form, success page and error page. All values are escaped.
"""

from html import escape
from typing import List, Optional

from fastapi import Request

from upload_gateway.schemas.upload import UploadResult

PAGE_TITLE = "Blob Storage Uploader"


def wants_html(request: Request) -> bool:
    """True if the client asked for an HTML response (browser form post)."""
    return "text/html" in request.headers.get("accept", "")


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"<head><meta charset=\"utf-8\"><title>{escape(title)}</title></head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )


def render_index(namespaces: List[str]) -> str:
    """Upload form listing the allowed namespaces; the first is preselected."""
    options = "\n".join(
        f'    <option value="{escape(ns)}"{" selected" if i == 0 else ""}>{escape(ns)}</option>'
        for i, ns in enumerate(namespaces)
    )
    body = f"""<h1>{PAGE_TITLE}</h1>
<form action="/upload" method="post" enctype="multipart/form-data">
  <h3>Authentication</h3>
  <label for="apiKey">API Key (optional):</label>
  <input type="password" id="apiKey" name="apiKey" placeholder="your-api-key-here" />
  <br /><br />
  <label for="username">Username (optional):</label>
  <input type="text" id="username" name="username" placeholder="admin" />
  <br /><br />
  <label for="password">Password (optional):</label>
  <input type="password" id="password" name="password" placeholder="password" />
  <br /><br />
  <hr />
  <label for="file">Select File:</label>
  <input type="file" id="file" name="file" required />
  <br /><br />
  <label for="namespace">Namespace:</label>
  <select id="namespace" name="namespace" required>
{options}
  </select>
  <br /><br />
  <p><strong>Allowed namespaces:</strong> {escape(", ".join(namespaces))}</p>
  <button type="submit">Upload File</button>
</form>"""
    return _page(PAGE_TITLE, body)


def render_upload_success(result: UploadResult) -> str:
    """Confirmation page for a stored upload."""
    url = escape(result.url)
    body = f"""<h1>Upload Successful!</h1>
<p><strong>File ID:</strong> {escape(result.fileId)}</p>
<p><strong>Key:</strong> {escape(result.key)}</p>
<p><strong>Original Name:</strong> {escape(result.originalName)}</p>
<p><strong>Size:</strong> {result.size} bytes</p>
<p><strong>Type:</strong> {escape(result.type)}</p>
<p><strong>File URL:</strong> <a href="{url}" target="_blank">{url}</a></p>
<p><strong>Markup:</strong> <code>{escape(result.markup)}</code></p>
<br />
<a href="/">Upload another file</a>"""
    return _page("Upload Success", body)


def render_error(detail: str, allowed_namespaces: Optional[List[str]] = None) -> str:
    """Error page with an optional allow-list."""
    lines = [
        "<h1>Upload Error</h1>",
        f"<p>{escape(detail)}</p>",
    ]
    if allowed_namespaces is not None:
        lines.append(f"<p>Allowed namespaces: {escape(', '.join(allowed_namespaces))}</p>")
    lines.append('<a href="/">Go back</a>')
    return _page("Upload Error", "\n".join(lines))
