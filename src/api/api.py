import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Annotated, AsyncGenerator, Awaitable, Callable

from fastapi import Depends, FastAPI, Request, Response
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from api.dependencies import get_quote_server, get_request_deadline
from config import config
from db.db import create_db_engine
from domain.deadline import Deadline
from services.quote_server import QuoteReply, QuoteServer, build_quote_server

logger = logging.getLogger(__name__)

DISCONNECT_POLL_SECONDS = 0.01


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    settings = config()
    engine = create_db_engine(db_file=settings.db_file)
    fastapi_app.state.quote_server = build_quote_server(sessionmaker(engine), settings)
    yield
    engine.dispose()


app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start_time = perf_counter()
    response = await call_next(request)
    process_time = perf_counter() - start_time
    logger.info("%s %s -> %d in %.4fs", request.method, request.url, response.status_code, process_time)
    return response


async def cancel_on_disconnect(request: Request, deadline: Deadline) -> None:
    while not deadline.done:
        if await request.is_disconnected():
            logger.info("Client disconnected from %s, cancelling request", request.url.path)
            deadline.cancel()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


async def handle_until_disconnect(request: Request, server: QuoteServer, deadline: Deadline) -> QuoteReply:
    """Run the blocking pipeline in the thread pool while watching the caller."""
    watcher = asyncio.create_task(cancel_on_disconnect(request, deadline))
    try:
        return await run_in_threadpool(server.handle, deadline)
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher


@app.get("/cotacao")
async def get_quote(
    request: Request,
    server: Annotated[QuoteServer, Depends(get_quote_server)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> Response:
    reply = await handle_until_disconnect(request, server, deadline)
    return Response(content=reply.body, status_code=reply.status_code, media_type=reply.media_type)
