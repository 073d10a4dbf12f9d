# apps/api_gateway/app_factory.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from services.encoding.aamva import parse_elements
from services.pipeline import DocumentPipeline, PipelineError, ValidationFailed

logger = logging.getLogger(__name__)


def _validation_detail(e: ValidationFailed) -> Dict[str, Any]:
    return {"errors": list(e.result.errors), "warnings": list(e.result.warnings)}


def create_app(
    *,
    pipeline: Any,
    max_concurrency: int = 4,
) -> FastAPI:
    app = FastAPI(title="AAMVA ID Maker API")

    def generate_single(record: Dict[str, Any], orientation: Optional[str]) -> Dict[str, Any]:
        try:
            result = pipeline.generate(record, orientation=orientation)
        except ValidationFailed as e:
            raise HTTPException(status_code=422, detail=_validation_detail(e)) from e
        except (PipelineError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {
            "validation": result.validation.to_dict(),
            "document": result.document.to_dict(),
        }

    @app.get("/")
    async def root():
        return RedirectResponse(url="/docs")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @app.post("/validate")
    async def validate_record(record: Dict[str, Any] = Body(...)):
        try:
            return pipeline.validate(record).to_dict()
        except PipelineError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @app.post("/encode")
    async def encode_record(record: Dict[str, Any] = Body(...)):
        try:
            return pipeline.encode(record).to_dict()
        except ValidationFailed as e:
            raise HTTPException(status_code=422, detail=_validation_detail(e)) from e
        except (PipelineError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @app.post("/decode")
    async def decode_payload(body: Dict[str, Any] = Body(...)):
        data = body.get("data")
        if not isinstance(data, str):
            raise HTTPException(status_code=400, detail="Body must contain a 'data' string.")
        try:
            return {"elements": parse_elements(data)}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @app.post("/generate")
    async def generate_document(
        record: Dict[str, Any] = Body(...),
        orientation: Optional[str] = Query(None),
    ):
        return generate_single(record, orientation)

    @app.post("/generate/batch")
    async def generate_documents_batch(
        records: List[Dict[str, Any]] = Body(...),
        orientation: Optional[str] = Query(None),
    ):
        sem = asyncio.Semaphore(max_concurrency)

        async def one(i: int, rec: Dict[str, Any]):
            async with sem:
                try:
                    out = await run_in_threadpool(generate_single, rec, orientation)
                    return {"index": i, "ok": True, "result": out}
                except HTTPException as e:
                    return {"index": i, "ok": False, "error": e.detail}

        results = await asyncio.gather(*(one(i, r) for i, r in enumerate(records)))
        logger.info("Batch of %d records: %d ok", len(results), sum(1 for r in results if r["ok"]))
        return {"count": len(results), "results": results}

    return app
