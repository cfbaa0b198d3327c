import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from syncnotes import config
from syncnotes.api import notes

logger = logging.getLogger(__name__)


async def _collect_garbage() -> None:
    # filesystem work stays off the event loop
    try:
        await run_in_threadpool(notes.collect_garbage)
    except Exception:
        logger.exception("Garbage collection failed")


async def _gc_loop(interval_seconds: int) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        await _collect_garbage()


@asynccontextmanager
async def lifespan(app: FastAPI):
    notes.store.init()

    # clean up before serving, then on a fixed interval
    await _collect_garbage()
    gc_task = asyncio.create_task(_gc_loop(config.gc_interval_seconds()))
    logger.info("Serving notes from %s", notes.store.base_dir)

    yield

    gc_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await gc_task


app = FastAPI(title="Sync Notes API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://.*",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Authorization", "Content-Type"],
    expose_headers=["Link"],
    max_age=300,
)

app.include_router(notes.router)


@app.get("/health")
def health():
    return {"ok": True}
