from fastapi import FastAPI

from api.routes.scan import router as scan_router
from scanner.timers import shared_accumulator

app = FastAPI(title="Merter API", version="0.1.0")


@app.on_event("startup")
def _start_delay_timer():
    # one ticker per process, shared by every scan request
    shared_accumulator()


@app.get("/health")
def health():
    return {"ok": True, "service": "merter"}


app.include_router(scan_router, prefix="/scan", tags=["scan"])
