
import json
from typing import Any, AsyncIterator, Dict

from fastapi import FastAPI, Request, Depends
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, HTMLResponse, PlainTextResponse
from mangum import Mangum
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import InvalidInput, InternalError, ServerMisconfigured, TagGenerationError, UpstreamError
from .llm_client import CompletionFailed, TagCompletionClient, build_prompt
from .logger import logger
from .schemas import MAX_QUERY_LENGTH, ErrorResponse, TagRequest, TagResponse
from .tag_parser import Unparseable, parse_tag_content, sanitize_tags

app = FastAPI(title="tag-generator", version="1.0.0")

# Prometheus metrics – add middleware BEFORE app starts
if not getattr(app.state, "metrics_instrumented", False):
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    app.state.metrics_instrumented = True


def require_api_key(settings: Settings = Depends(get_settings)) -> str:
    """
    Fail fast with 500 if the upstream credential is not configured.
    Runs before the body is read, so it wins over input validation.
    """
    if not settings.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY not configured")
        raise ServerMisconfigured()
    return settings.OPENAI_API_KEY


async def get_completion_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[TagCompletionClient]:
    client = TagCompletionClient.from_settings(settings)
    try:
        yield client
    finally:
        await client.aclose()


def _parse_body(raw: bytes) -> Dict[str, Any]:
    # Lenient: a malformed or non-object body counts as empty.
    try:
        body = json.loads(raw or b"{}")
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@app.exception_handler(TagGenerationError)
def tag_generation_error_handler(request: Request, exc: TagGenerationError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return PlainTextResponse("Method Not Allowed", status_code=405, headers=exc.headers)
    return await http_exception_handler(request, exc)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def index():
    return """
<!doctype html><meta charset="utf-8">
<title>Tag Generator</title>
<style>body{font-family:system-ui;margin:2rem;max-width:780px} input,select,button{padding:.5rem;margin:.25rem}
#tags span{display:inline-block;background:#eee;border-radius:4px;padding:.2rem .5rem;margin:.2rem}</style>
<h1>Tag Generator</h1>
<div>
  <input id="q" placeholder="describe your video (e.g., lofi beats to study to)" maxlength="180" size="48">
  <select id="mode">
    <option value="youtube">youtube</option>
    <option value="tiktok">tiktok</option>
    <option value="instagram">instagram</option>
  </select>
  <button onclick="go()">Generate</button>
  <button onclick="copyTags()">Copy</button>
</div>
<div id="tags"></div>
<pre id="out"></pre>
<script>
let lastTags = [];
async function go(){
  const body = {
    q:    document.getElementById('q').value,
    mode: document.getElementById('mode').value
  };
  const r = await fetch('/generate-tags', {method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify(body)});
  const text = await r.text();
  const tagsEl = document.getElementById('tags');
  tagsEl.innerHTML = '';
  document.getElementById('out').textContent = '';
  if (!r.ok) { document.getElementById('out').textContent = text; return; }
  lastTags = JSON.parse(text).tags || [];
  for (const t of lastTags) {
    const s = document.createElement('span');
    s.textContent = t;
    tagsEl.appendChild(s);
  }
}
function copyTags(){
  if (lastTags.length) navigator.clipboard.writeText(lastTags.join(', '));
}
</script>
"""


@app.post(
    "/generate-tags",
    response_model=TagResponse,
    dependencies=[Depends(require_api_key)],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate_tags(
    request: Request,
    client: TagCompletionClient = Depends(get_completion_client),
):
    try:
        req = TagRequest.model_validate(_parse_body(await request.body()))
        if not req.q:
            raise InvalidInput("Missing query")
        if len(req.q) > MAX_QUERY_LENGTH:
            raise InvalidInput("Input too long")

        result = await client.complete(build_prompt(req.q, req.mode))
        if isinstance(result, CompletionFailed):
            raise UpstreamError(detail=result.detail)

        parsed = parse_tag_content(result.content)
        if isinstance(parsed, Unparseable):
            logger.info("Model output was not JSON; using comma/newline fallback")
            tags = sanitize_tags(parsed.fallback)
        else:
            tags = sanitize_tags(parsed.value)
    except TagGenerationError:
        raise
    except Exception as e:
        logger.exception(f"Tag generation failed: {e}")
        raise InternalError() from e

    logger.info(f"Responding with {len(tags)} tags for mode={req.mode}")
    return TagResponse(tags=tags)


# Serverless entrypoint (AWS Lambda / API Gateway style hosts)
handler = Mangum(app, lifespan="off")
