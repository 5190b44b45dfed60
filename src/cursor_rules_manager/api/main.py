"""FastAPI 앱 정의."""
# src/cursor_rules_manager/api/main.py
import logging
import traceback

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from ..config import ensure_config_initialized, get_public_dir
from ..errors import ProblemException
from ..logging_setup import configure_logging
from ..problem_details import PROBLEM_BASE_URI, MachineReadableError, ProblemDetails
from ..tracing import get_trace_id, new_child_span, start_trace
from . import global_rules, postmortems, projects, settings

load_dotenv()  # .env 파일 로드


logger = logging.getLogger(__name__)
app = FastAPI(title="Cursor Rules Manager API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """FastAPI 시작 시 로깅 및 설정 디렉토리 초기화."""
    configure_logging()
    ensure_config_initialized()


@app.middleware("http")
async def trace_context_middleware(request: Request, call_next):
    trace_id = start_trace(request.headers.get("traceparent"))
    response = await call_next(request)
    response.headers["X-Trace-Id"] = trace_id
    return response


@app.exception_handler(ProblemException)
async def problem_exception_handler(request: Request, exc: ProblemException):
    """도메인 예외는 이미 ProblemDetails를 들고 있으므로 instance만 채워서 반환."""
    problem = exc.problem.model_copy(update={"instance": request.url.path})
    if problem.status >= 500:
        logger.error("%s: %s", problem.title, problem.detail)
    else:
        logger.info("%s: %s", problem.title, problem.detail)
    return JSONResponse(status_code=problem.status, content=problem.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # 나머지는 "internal-error"로 래핑하되, errors[]도 채워서 LLM-friendly 하게
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error("Unhandled exception on %s", request.url.path, exc_info=exc)
    problem = ProblemDetails(
        type=f"{PROBLEM_BASE_URI}/internal-error",
        title="Unexpected error",
        status=500,
        detail=str(exc),
        instance=request.url.path,
        errors=[
            MachineReadableError(
                code="UNHANDLED_EXCEPTION",
                target=request.url.path,
                detail="Unhandled exception occurred while handling the request.",
                meta={
                    "exceptionType": type(exc).__name__,
                    "traceback": tb_str,
                    "errorClass": "system_bug",
                },
            )
        ],
        trace_id=get_trace_id(),
        span_id=new_child_span(),
        error_class="system_bug",
    )
    return JSONResponse(status_code=500, content=problem.model_dump())


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트."""
    return {"status": "ok"}


app.include_router(global_rules.router)
app.include_router(projects.router)
app.include_router(postmortems.router)
app.include_router(settings.router)


_public_dir = get_public_dir()
if _public_dir.is_dir():
    # 프런트엔드 정적 파일 (index.html 포함)
    app.mount("/", StaticFiles(directory=str(_public_dir), html=True), name="public")
else:

    @app.get("/", include_in_schema=False)
    async def redirect_to_docs():
        """프런트엔드가 없으면 루트 경로를 Swagger docs로 리다이렉트."""
        return RedirectResponse(url="/docs")
