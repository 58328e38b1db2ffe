"""
Request/response tracing with rich panels.

Only used when ``Environment.trace`` is enabled.
"""
from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .request import Request
from .types import TransportResponse

SENSITIVE_HEADERS = ("authorization", "x-api-key", "cookie", "proxy-authorization")

console = Console(stderr=True)


def mask_sensitive(value: Optional[str], visible_chars: int = 15) -> str:
    """Mask sensitive value for safe logging."""
    if value is None:
        return "<None>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Mask credential headers for display."""
    masked = dict(headers)
    for key in masked:
        if key.lower() in SENSITIVE_HEADERS:
            masked[key] = mask_sensitive(masked[key])
    return masked


def format_body(body: Optional[bytes]) -> str:
    if not body:
        return ""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(body)} bytes>"


def _lexer_for(content_type: Optional[str]) -> str:
    if content_type and "json" in content_type:
        return "json"
    return "text"


def print_request(request: Request, attempt: int = 0) -> None:
    title = "[bold blue]Request[/bold blue]" if attempt == 0 else "[bold blue]Request (retry)[/bold blue]"
    console.print(Panel(f"[bold cyan]{request.method}[/bold cyan] {request.url}", title=title))
    console.print("[bold]Headers:[/bold]", mask_headers(request.headers_dict()))
    body = format_body(request.body)
    if body:
        console.print(Panel(
            Syntax(body, _lexer_for(request.header("content-type")), word_wrap=True),
            title="[bold]Request Body[/bold]",
        ))


def print_response(response: TransportResponse) -> None:
    status_color = "green" if response.ok else "red"
    info = f"[bold {status_color}]{response.status_code}[/bold {status_color}] {response.reason_phrase}"
    console.print(Panel(info, title=f"[bold blue]Response[/bold blue] ({response.url})"))
    console.print("[bold]Headers:[/bold]", mask_headers(dict(response.headers)))
    body = format_body(response.content)
    if body:
        console.print(Panel(
            Syntax(body, _lexer_for(response.header("content-type")), word_wrap=True),
            title=f"[bold]Response Body[/bold] (URL: {response.url})",
        ))
