"""HTTP editor service: save, load and run a single Nexa source buffer."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from nexa.config import Settings
from nexa.pipeline import try_compile
from runtime.rustc import RustcToolchain, Toolchain, ToolchainError

logger = logging.getLogger(__name__)

SAMPLE_PROGRAM = (
    "// Nexa sample program\n"
    "var i = 1;\n"
    "while i < 5:\n"
    "    println(i);\n"
    "    i += 1;\n"
)

EDITOR_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Nexa Editor</title></head>
<body>
<textarea id="code" rows="24" cols="80"></textarea><br>
<button onclick="save()">Save</button>
<button onclick="run()">Run</button>
<pre id="out"></pre>
<script>
async function load() {
  const r = await fetch('/load');
  document.getElementById('code').value = (await r.json()).content;
}
async function save() {
  await fetch('/save', {method: 'POST', headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({content: document.getElementById('code').value})});
}
async function run() {
  await save();
  const r = await (await fetch('/run', {method: 'POST'})).json();
  document.getElementById('out').textContent = r.success
    ? r.output + (r.program_output || '') : r.error;
}
load();
</script>
</body>
</html>
"""


class SaveRequest(BaseModel):
    """Request body for /save."""
    content: str = Field(..., description="Full program text")


class LoadResponse(BaseModel):
    content: str


class RunResponse(BaseModel):
    """Outcome of compiling (and optionally running) the saved buffer."""
    success: bool
    output: str = ""
    program_output: Optional[str] = None
    error: Optional[str] = None


def create_app(settings: Optional[Settings] = None, toolchain: Optional[Toolchain] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if toolchain is None and settings.execute:
        toolchain = RustcToolchain(settings.rustc, timeout=settings.run_timeout)
    buffer_path = settings.buffer_path

    app = FastAPI(
        title="Nexa Editor",
        description="Edit, compile and run Nexa programs",
        version="0.1.0",
    )

    @app.get("/", response_class=HTMLResponse)
    def editor() -> str:
        return EDITOR_HTML

    @app.post("/save", response_class=PlainTextResponse)
    def save_code(request: SaveRequest) -> str:
        try:
            buffer_path.write_text(request.content, encoding="utf-8")
        except OSError as e:
            logger.error("failed to save buffer %s: %s", buffer_path, e)
            raise HTTPException(status_code=500, detail="Failed to save code") from e
        return "Code saved successfully"

    @app.get("/load", response_model=LoadResponse)
    def load_code() -> LoadResponse:
        try:
            content = buffer_path.read_text(encoding="utf-8")
        except OSError:
            content = SAMPLE_PROGRAM
        return LoadResponse(content=content)

    @app.post("/run", response_model=RunResponse)
    def run_code():
        try:
            source = buffer_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("failed to read buffer %s: %s", buffer_path, e)
            body = RunResponse(success=False, error="Failed to read code")
            return JSONResponse(status_code=500, content=body.model_dump())

        result = try_compile(source)
        if not result.ok:
            return RunResponse(success=False, error=result.error)

        try:
            buffer_path.with_suffix(".rs").write_text(result.code, encoding="utf-8")
        except OSError as e:
            logger.error("failed to save generated code: %s", e)
            body = RunResponse(success=False, error="Failed to save Rust code")
            return JSONResponse(status_code=500, content=body.model_dump())

        if toolchain is None:
            return RunResponse(success=True, output=result.code)
        try:
            ran = toolchain.run(result.code)
        except ToolchainError as e:
            return RunResponse(success=False, output=result.code, error=str(e))
        return RunResponse(success=True, output=result.code, program_output=ran.stdout)

    return app


def main():
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    settings = Settings.from_env()
    logger.info("Starting web editor server at http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
