import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from govview import config
from govview.governance.envelope import error_envelope
from govview.governance.params import invalid_parameter
from govview.lib.errors import ApiError, LedgerRpcError, LedgerUnavailable
from govview.lib.ledger_rpc import JsonRpcLedger, LedgerRpc

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("govview")

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("=== Application Starting ===")
    ledger = JsonRpcLedger.from_config()
    app.state.ledger = ledger
    try:
        height = await ledger.get_block_count()
        logger.info(f"Ledger reachable at {config.RPC_URL}, height {height}")
    except (LedgerUnavailable, LedgerRpcError) as err:
        logger.warning(f"Ledger check failed, but continuing... ({err})")
    yield
    # Shutdown
    await ledger.aclose()
    logger.info("=== Application Shutdown ===")


app = FastAPI(lifespan=lifespan)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_ledger(request: Request) -> LedgerRpc:
    return request.app.state.ledger


def request_url(request: Request) -> str:
    """Path plus query string of the request, as echoed in error envelopes."""
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, err: ApiError):
    return JSONResponse(status_code=err.status_code, content=error_envelope(err, request_url(request)))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, err: RequestValidationError):
    invalid = invalid_parameter(err.errors())
    return JSONResponse(status_code=400, content=error_envelope(invalid, request_url(request)))


@app.get("/healthz")
async def healthz(ledger: LedgerRpc = Depends(get_ledger)):
    try:
        height = await ledger.get_block_count()
        return JSONResponse(status_code=200, content={"status": "ok", "height": height})
    except ApiError as err:
        return JSONResponse(
            status_code=503, content={"status": "error", "error": err.message}
        )
