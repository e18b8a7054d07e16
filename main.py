import logging
import uuid
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from config import Config
from models import AudioUpload, ErrorResponse, HealthResponse, SpeechRequest, TextFeedbackRequest
from services.feedback_assembler import FeedbackAssembler
from services.speech_synthesis import SpeechSynthesisService
from services.text_feedback import TextFeedbackService

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(title="Pronunciation Feedback Service", version="1.0.0")

# Initialize services
feedback_assembler = FeedbackAssembler()
text_feedback_service = TextFeedbackService(feedback_assembler.feedback_generator)
speech_service = SpeechSynthesisService()


def error_response(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=message, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def missing_credential_response(*names: str) -> Optional[JSONResponse]:
    """Fixed configuration error for the first unset provider key, else None."""
    for name in names:
        if not getattr(Config, name, None):
            logging.error(f"{name} is not set")
            return error_response(500, f"{name} is not set.")
    return None


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(400, "Invalid request body.", str(exc.errors()))


@app.post("/api/pronunciation-feedback")
async def pronunciation_feedback(request: Request):
    """
    Receives a target sentence and a recording, returns guarded pronunciation feedback.
    """
    request_id = str(uuid.uuid4())[:8]

    config_error = missing_credential_response("OPENAI_API_KEY", "GEMINI_API_KEY")
    if config_error:
        return config_error

    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        return error_response(400, "Use multipart/form-data with targetText and audio.")

    try:
        async with request.form() as form:
            target_text = form.get("targetText")
            target_text = target_text.strip() if isinstance(target_text, str) else ""
            if not target_text:
                return error_response(400, "targetText is required.")

            audio_file = form.get("audio")
            if not isinstance(audio_file, UploadFile):
                return error_response(400, "audio file is required.")

            content = await audio_file.read()
            if len(content) == 0:
                return error_response(400, "audio file is required.")
            if len(content) > Config.MAX_FILE_SIZE:
                return error_response(400, "File too large")

            audio = AudioUpload(
                filename=audio_file.filename or "recording.webm",
                content_type=audio_file.content_type or "",
                data=content,
            )
    except HTTPException as e:
        # Malformed multipart body
        return error_response(400, "Use multipart/form-data with targetText and audio.", str(e.detail))

    logging.info(f"[{request_id}] Received pronunciation request ({len(audio.data)} bytes, {audio.content_type or 'unknown type'})")
    try:
        feedback = await feedback_assembler.assemble(target_text, audio, request_id)
    except Exception as e:
        logging.error(f"[{request_id}] Pronunciation analysis failed: {str(e)}")
        return error_response(500, "Failed to analyze pronunciation from audio.", str(e))

    logging.info(f"[{request_id}] Finished pronunciation analysis, overall score {feedback.overall_score}")
    return JSONResponse(content=feedback.model_dump(by_alias=True))


@app.post("/api/text-feedback")
async def text_feedback(body: TextFeedbackRequest):
    """
    Explains grammar and wording of a selected passage and suggests rewrites.
    """
    request_id = str(uuid.uuid4())[:8]

    config_error = missing_credential_response("GEMINI_API_KEY")
    if config_error:
        return config_error

    full_text = (body.full_text or "").strip()
    selected_text = (body.selected_text or "").strip()
    if not selected_text:
        return error_response(400, "selectedText is required.")

    logging.info(f"[{request_id}] Received text feedback request ({len(selected_text)} characters selected)")
    try:
        feedback = await text_feedback_service.review(full_text, selected_text)
    except Exception as e:
        logging.error(f"[{request_id}] Text feedback failed: {str(e)}")
        return error_response(500, "Failed to analyze selected text.", str(e))

    return JSONResponse(content=feedback.model_dump(by_alias=True))


@app.post("/api/tts")
async def text_to_speech(body: SpeechRequest):
    """
    Synthesizes the given text as mp3 audio.
    """
    request_id = str(uuid.uuid4())[:8]

    config_error = missing_credential_response("OPENAI_API_KEY")
    if config_error:
        return config_error

    text = (body.text or "").strip()
    if not text:
        return error_response(400, "text is required.")

    try:
        audio_bytes = await speech_service.synthesize(text)
    except Exception as e:
        logging.error(f"[{request_id}] Speech synthesis failed: {str(e)}")
        return error_response(500, "Failed to generate speech.", str(e))

    return Response(
        content=audio_bytes,
        media_type="audio/mpeg",
        headers={"Cache-Control": "no-store"},
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", message="Pronunciation Feedback Service is running")


@app.get("/health/openai", response_model=HealthResponse)
async def openai_health_check():
    """Check OpenAI service connectivity"""
    if not Config.OPENAI_API_KEY:
        return HealthResponse(status="error", message="OPENAI_API_KEY is not set.")

    try:
        headers = {"Authorization": f"Bearer {Config.OPENAI_API_KEY}"}

        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(f"{Config.OPENAI_BASE_URL}/models", headers=headers)

            if response.status_code == 401:
                return HealthResponse(status="error", message="Invalid API key")
            elif response.status_code == 429:
                return HealthResponse(status="warning", message="Rate limited")
            elif response.status_code == 200:
                return HealthResponse(status="healthy", message="OpenAI is reachable")
            else:
                return HealthResponse(status="error", message=f"Unexpected status: {response.status_code}")

    except httpx.TimeoutException:
        return HealthResponse(status="error", message="Connection timeout")
    except httpx.HTTPError:
        return HealthResponse(status="error", message="Network connectivity issue")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
