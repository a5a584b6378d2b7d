import json
import logging

from fastapi import FastAPI, Request, HTTPException, BackgroundTasks
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from app.settings import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("cryptogram")

# Populated at startup
_trie = None


class SolveRequest(BaseModel):
    ciphertext: str


def create_app() -> FastAPI:
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _trie

        from app.trie import Trie, load_trie
        logger.info("Loading dictionary from %s", settings.DICTIONARY_PATH)
        try:
            _trie = load_trie(str(settings.DICTIONARY_PATH), settings.MIN_WORD_LENGTH)
        except OSError as e:
            logger.error("Could not load dictionary %s: %s", settings.DICTIONARY_PATH, e)
            _trie = Trie.from_words([])
        logger.info("Trie loaded (%d words)", len(_trie))

        yield

        _trie = None

    application = FastAPI(title="Cryptogram Solver", lifespan=lifespan)

    @application.get("/health")
    async def health():
        return {
            "status": "ok",
            "trie_loaded": _trie is not None and len(_trie) > 0,
            "word_count": len(_trie) if _trie is not None else 0,
        }

    @application.post("/solve")
    def solve(body: SolveRequest, background_tasks: BackgroundTasks):
        from app.metrics import Deadline, StageTimer
        from app.notifier import send_notification
        from app.solver import CryptogramSolver, MalformedCiphertextError

        ciphertext = body.ciphertext.lower()
        logger.info("POST /solve ciphertext=%r", ciphertext)

        timer = StageTimer()
        deadline = Deadline(settings.SOLVE_TIMEOUT_SECONDS)
        solver = CryptogramSolver(_trie, settings.ALLOW_FIXED_POINTS)

        with timer.stage("solve"):
            try:
                all_solutions = solver.solve(ciphertext, should_stop=deadline)
            except MalformedCiphertextError as e:
                raise HTTPException(400, str(e))

        solutions = all_solutions[:settings.MAX_RESULTS] if settings.MAX_RESULTS > 0 else all_solutions
        logger.info("Found %d solutions (returning %d)", len(all_solutions), len(solutions))

        if settings.NOTIFY_ENABLED:
            background_tasks.add_task(
                send_notification, ciphertext, all_solutions, timer.summary(),
                settings.NTFY_TOPIC, settings.NTFY_URL, settings.NOTIFY_SOLUTIONS_LIMIT,
            )

        if settings.DEBUG:
            _save_debug_artifacts(ciphertext, all_solutions, deadline.expired, timer)

        return JSONResponse({
            "ciphertext": ciphertext,
            "solutions": solutions,
            "solution_count": len(all_solutions),
            "interrupted": deadline.expired,
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
        })

    @application.post("/solve/stream")
    def solve_stream(body: SolveRequest):
        """Newline-delimited JSON, one line per solution as the search finds it."""
        from app.metrics import Deadline, StageTimer
        from app.solver import CryptogramSolver, MalformedCiphertextError

        ciphertext = body.ciphertext.lower()
        logger.info("POST /solve/stream ciphertext=%r", ciphertext)

        timer = StageTimer()
        deadline = Deadline(settings.SOLVE_TIMEOUT_SECONDS)
        solver = CryptogramSolver(_trie, settings.ALLOW_FIXED_POINTS)
        try:
            found = solver.iter_solutions(ciphertext, should_stop=deadline)
        except MalformedCiphertextError as e:
            raise HTTPException(400, str(e))

        def lines():
            count = 0
            for solution in found:
                count += 1
                yield json.dumps({"solution": solution.plaintext}) + "\n"
            logger.info("Streamed %d solutions in %.1fms", count, timer.total_ms)
            yield json.dumps({
                "done": True,
                "solution_count": count,
                "interrupted": deadline.expired,
                "elapsed_ms": timer.total_ms,
            }) + "\n"

        return StreamingResponse(lines(), media_type="application/x-ndjson")

    @application.get("/api/settings")
    async def api_get_settings():
        from app.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from app.settings import update_settings, get_editable_settings
        body = await request.json()
        if not isinstance(body, dict):
            raise HTTPException(400, "Expected a JSON object")
        errors = update_settings(settings, **body)
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


def _save_debug_artifacts(ciphertext, solutions, interrupted, timer):
    from datetime import datetime

    debug_dir = settings.BASE_DIR / "debug"
    debug_dir.mkdir(exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    result = {
        "timestamp": ts,
        "ciphertext": ciphertext,
        "solution_count": len(solutions),
        "solutions": solutions,
        "interrupted": interrupted,
        "timings": timer.summary(),
        "total_ms": timer.total_ms,
    }
    with open(debug_dir / f"{ts}_result.json", "w") as f:
        json.dump(result, f, indent=2)

    logger.info("Saved debug artifacts to debug/%s_result.json", ts)


app = create_app()
