import asyncio
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import base64

from scoresynth.core.config import load_config
from scoresynth.dsp.mixer import peak
from scoresynth.errors import ExternalEncoderFailure, InvalidScoreShape, UnknownWaveformKind
from scoresynth.export.compressed import CompressedSink, FORMATS
from scoresynth.render.pipeline import Pipeline
from scoresynth.score.loader import parse_score

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("scoresynth")

app = FastAPI(
    title="Score Synth",
    version="1.0.0",
    description="Score rendering service"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "scoresynth"}


@app.post("/render")
async def render(score: dict, format: str = "wav", seed: Optional[int] = None):
    """
    Renders a score.
    Returns JSON with base64-encoded audio, duration and peak.
    """
    format = format.lower()
    if format != "wav" and format not in FORMATS:
        raise HTTPException(status_code=422, detail=f"Unsupported format: {format}")

    try:
        parsed = parse_score(score)
    except (InvalidScoreShape, UnknownWaveformKind) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    pipeline = Pipeline(seed=seed, app_config=load_config())
    # Rendering is CPU bound; keep it off the event loop
    audio = await asyncio.to_thread(pipeline.render, parsed)
    data = pipeline.encoder.encode(audio)

    if format != "wav":
        try:
            data = await CompressedSink.encode_async(data, pipeline.metadata_for(parsed), format)
        except ExternalEncoderFailure as exc:
            logger.error("Compressed export failed: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc))

    return {
        "audio": base64.b64encode(data).decode("utf-8"),
        "format": format,
        "name": parsed.name,
        "duration_s": audio.shape[-1] / pipeline.config.sample_rate,
        "peak": peak(audio),
    }

if __name__ == "__main__":
    uvicorn.run("scoresynth.main:app", host="0.0.0.0", port=8000, reload=True)
