# apps/api_gateway/main.py
from __future__ import annotations

import logging

from apps.common.settings import load_settings
from services.pipeline import DocumentPipeline, PipelineConfig

from apps.api_gateway.app_factory import create_app

logging.basicConfig(level=logging.INFO)

settings = load_settings()

pipeline = DocumentPipeline(
    PipelineConfig(
        normalize_input=settings.normalize_input,
        default_orientation=settings.default_orientation,
        template=settings.template,
        jurisdiction=settings.jurisdiction,
    )
)

app = create_app(pipeline=pipeline, max_concurrency=settings.max_concurrency)
