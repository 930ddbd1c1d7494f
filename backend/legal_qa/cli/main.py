"""CLI entrypoint for the legal QA service."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer

app = typer.Typer(name="legal-qa", help="Legal case search and question answering CLI")

DEFAULT_HOST = "http://127.0.0.1:3000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("LEGALQA_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    resp = requests.request(method, url, timeout=120, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _echo(resp: requests.Response) -> None:
    typer.echo(json.dumps(resp.json(), indent=2, ensure_ascii=False))


@app.command()
def upsert(
    path: Path = typer.Argument(..., help="JSON file holding one case record (camelCase keys)"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Store a structured case record."""
    body = json.loads(path.expanduser().read_text(encoding="utf-8"))
    _echo(_request("POST", "/api/v1/legal", host=host, json=body))


@app.command()
def parse(
    path: Path = typer.Argument(..., help="Text or JSON file with the raw case text"),
    metadata: Optional[str] = typer.Option(None, "--metadata", help="Extra metadata as a JSON object"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Let the model structure raw case text, then store it."""
    body: dict[str, object] = {"legalText": path.expanduser().read_text(encoding="utf-8")}
    if metadata:
        body["additionalMetadata"] = json.loads(metadata)
    _echo(_request("POST", "/api/v1/legal/auto-parse", host=host, json=body))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Legal question"),
    top_k: int = typer.Option(5, "--top-k", help="Maximum number of related cases"),
    min_score: float = typer.Option(0.7, "--min-score", help="Minimum similarity score"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Answer a legal question from stored cases."""
    payload = {"question": question, "topK": top_k, "minScore": min_score}
    _echo(_request("POST", "/api/v1/legal/question", host=host, json=payload))


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    top_k: int = typer.Option(5, "--top-k", help="Number of matches to return"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Run a plain similarity search."""
    _echo(_request("POST", "/api/v1/legal/search", host=host, json={"query": query, "topK": top_k}))


@app.command()
def delete(
    vector_id: str = typer.Argument(..., help="Vector identifier returned by upsert"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Delete a stored case vector."""
    _echo(_request("DELETE", f"/api/v1/legal/{vector_id}", host=host))


@app.command()
def health(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Check that the server is up."""
    _echo(_request("GET", "/api/v1/server/health", host=host))


@app.command()
def serve(
    bind: str = typer.Option("0.0.0.0", "--bind", help="Interface to listen on"),
    port: int = typer.Option(3000, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("legal_qa.app:app", host=bind, port=port, reload=reload)


if __name__ == "__main__":
    app()
