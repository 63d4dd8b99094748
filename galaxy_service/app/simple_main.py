#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import contextlib, logging, tempfile, os, time
from pathlib import Path

from galaxy_filter.json_worker.streaming_parser import StreamingJSONParser
from galaxy_filter.pipeline import RunStats, iter_encoded
from shared.diagnostics import Diagnostics, FatalError
from shared.settings import byte_ceiling_from_env

app = FastAPI(title="Galaxy-Lite")
logger = logging.getLogger(__name__)

request_counter = Counter("galaxy_requests_total", "Total galaxy dump uploads")
bodies_counter = Counter("galaxy_bodies_total", "Bodies written to NDJSON responses")
process_duration = Histogram("galaxy_process_seconds", "Time spent streaming a response")


@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}


@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/process/file", tags=["process"])
async def process_file(file: UploadFile = File(...)):
    """Stream the upload's bodies back as NDJSON, one document per line."""
    request_counter.inc()
    limit = byte_ceiling_from_env()
    chunk_size = 8*1024*1024  # 8 MB
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json.gz") as tmp:
        while True:
            chunk = await file.read(chunk_size)
            if not chunk:
                break
            tmp.write(chunk)
        tmp_path = tmp.name

    diagnostics = Diagnostics(logger)
    parser = StreamingJSONParser(diagnostics=diagnostics)
    # unwinds reader -> temp file handle -> temp file
    stack = contextlib.ExitStack()
    stack.callback(Path(tmp_path).unlink)
    source = stack.enter_context(open(tmp_path, "rb"))
    try:
        reader = stack.enter_context(parser.open_compressed(source, limit))
    except FatalError as e:
        stack.close()
        raise HTTPException(status_code=400, detail=str(e))

    def body_lines():
        start = time.time()
        stats = RunStats()
        with stack:
            for line in iter_encoded(parser.iter_values(reader), diagnostics, stats):
                bodies_counter.inc()
                yield line
        process_duration.observe(time.time() - start)
        logger.info("%s: %s bodies, %s skipped", file.filename, stats.records, stats.skipped)

    # closes the stack even when the body is never iterated
    return StreamingResponse(body_lines(), media_type="application/x-ndjson",
                             background=BackgroundTask(stack.close))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
