"""
Bulletin Board API — Analysis Handler
=======================================

    POST /analyze  {"prompt": str, "file_urls"?: [str, ...]}
        → 200 model reply as raw text (code fence removed, otherwise untouched)

The reply is not parsed; prompts asking for JSON get whatever the model
produced. Provider failures raise AnalysisError and end as the generic 500.
"""

from bulletin.envelope import Envelope, text_envelope
from bulletin.router import RouteRequest
from bulletin.routes.validation import parse_body
from bulletin.schemas.vendor import AnalyzeRequest


async def analyze(request: RouteRequest, container) -> Envelope:
    data = parse_body(AnalyzeRequest, request)
    text = await container.analysis.analyze(data.prompt, data.file_urls)
    return text_envelope(200, text)
