import logging
import time
import uuid
from fastapi import FastAPI, Request
from dotenv import load_dotenv
from endpoints.webhook import router as webhook_router
from core.http_client import init_channel, close_channel
from core.config import settings
from core.logging import setup_logging, set_request_id, clear_request_id

load_dotenv()
setup_logging(settings.log_level)
app = FastAPI()

app.include_router(webhook_router)

http_logger = logging.getLogger("http.request")

@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    set_request_id(request_id)
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers["X-Request-Id"] = request_id
        return response
    finally:
        duration = time.perf_counter() - start
        http_logger.info(
            "HTTP request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "remote_ip": request.client.host if request.client else None,
                "latency": f"{duration:.6f}s",
            },
        )
        clear_request_id()

@app.on_event("startup")
async def startup() -> None:
    settings.validate_runtime()
    init_channel()

@app.on_event("shutdown")
async def shutdown() -> None:
    await close_channel()

@app.get("/healthz")
def root():
    return {"message": "Space chatbot running"}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
