"""
HTTP boundary: multipart upload in, per-section timetable payload out.
"""

import asyncio
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from .config import EngineConfig, get_config
from .diagnostic import get_diagnostic
from .errors import MalformedWorkbookError, MissingInputError
from .log_config import get_logger, setup_logging
from .main import process_timetable

log = get_logger(__name__)


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    config = config or get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    app = FastAPI(title="Timetable Sheet Extractor", version="0.1.0")
    app.dependency_overrides[get_config] = lambda: config

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/parse")
    async def parse_timetable(
        file: Optional[UploadFile] = File(default=None),
        section: Optional[str] = Form(default=None),
        settings: EngineConfig = Depends(get_config),
    ):
        """
        Extract a per-section timetable from an uploaded workbook.

        - `file`: .xlsx/.xlsm workbook (required)
        - `section`: optional section code, compared upper-cased
        """
        if file is None:
            return _error(400, "No file provided")

        data = await file.read()
        try:
            # CPU-bound scan; keep the event loop free
            result = await asyncio.to_thread(process_timetable, data, section, settings)
        except MissingInputError as e:
            return _error(400, str(e) or "No file provided")
        except MalformedWorkbookError as e:
            log.warning("workbook_rejected", filename=file.filename, error=str(e))
            return _error(422, "Failed to parse timetable", str(e))
        except Exception as e:
            log.exception("timetable_parse_failed", filename=file.filename)
            return _error(500, "Failed to parse timetable", str(e))

        result.diagnostic = await get_diagnostic(
            result.sample_cells,
            result.total_entries,
            result.available_sections,
            config=settings,
        )
        return result.to_payload()

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("extractor_engine.api:app", host="0.0.0.0", port=8000)
