from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
import structlog

from app.config import Settings
from app.deps import get_current_user, get_gateway, get_records, get_settings
from app.errors import InvalidInput, MissingFields, NotFound, QuestionExtractionFailed
from app.middleware.rate_limit import ai_generation_limit
from app.schemas import GenerateQuestionsRequest, SummarizeRequest
from app.services.llm import LLMGateway
from app.services.monitoring import AI_GENERATION_REQUESTS, QUESTIONS_EXTRACTED
from app.services.normalizer import normalize
from app.services.pdf import extract_text_from_pdf
from app.services.qa_extractor import NoQuestionsExtracted, extract
from app.services.records import StudyRecordStore
from app.services.sessions import Identity

logger = structlog.get_logger()

router = APIRouter(tags=["summaries"])


@router.post("/summarize")
@ai_generation_limit()
def summarize(
    request: Request,
    body: SummarizeRequest,
    user: Identity = Depends(get_current_user),
    records: StudyRecordStore = Depends(get_records),
    gateway: LLMGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    text = normalize(body.text, settings.max_text_length)

    # An uploaded PDF already has a record; reuse it when its text was submitted unchanged.
    record_id = None
    if body.summary_id:
        try:
            existing = records.get(body.summary_id, user.user_id)
        except NotFound:
            existing = None
        if existing is not None and existing.text.strip() == text:
            record_id = existing.id

    summary = gateway.summarize(text)
    if record_id is None:
        record_id = records.create(user.user_id, text)
    records.attach_summary(record_id, summary)
    return {"summary": summary, "summaryId": record_id}


@router.post("/generate-questions")
@ai_generation_limit()
def generate_questions(
    request: Request,
    body: GenerateQuestionsRequest,
    user: Identity = Depends(get_current_user),
    records: StudyRecordStore = Depends(get_records),
    gateway: LLMGateway = Depends(get_gateway),
):
    missing = [name for name, value in (("summaryId", body.summary_id), ("summary", body.summary)) if not (value or "").strip()]
    if missing:
        raise MissingFields(*missing)

    record = records.get(body.summary_id, user.user_id)
    if not record.summary:
        raise InvalidInput("Summarize this text before generating questions")
    # Questions always follow the stored summary so they match what history shows
    raw = gateway.generate_questions(record.summary)

    outcome = extract(raw)
    if isinstance(outcome, NoQuestionsExtracted):
        AI_GENERATION_REQUESTS.labels(type="questions", status="no_pairs").inc()
        logger.warning(
            "questions_not_extracted",
            record_id=record.id,
            raw_length=len(outcome.raw_text),
            raw_preview=outcome.raw_text[:200],
        )
        raise QuestionExtractionFailed()

    QUESTIONS_EXTRACTED.inc(len(outcome.pairs))
    records.attach_questions(record.id, outcome.pairs)
    return {"questions": outcome.to_list()}


@router.post("/upload")
async def upload_pdf(
    pdf: UploadFile | None = File(None),
    user: Identity = Depends(get_current_user),
    records: StudyRecordStore = Depends(get_records),
    settings: Settings = Depends(get_settings),
):
    if pdf is None or not pdf.filename:
        raise InvalidInput("No file uploaded")
    if not pdf.filename.lower().endswith(".pdf") and pdf.content_type != "application/pdf":
        raise InvalidInput("File must be a PDF")

    # One byte past the limit is enough to tell an oversized file apart
    content = await pdf.read(settings.max_upload_bytes + 1)
    if not content:
        raise InvalidInput("Uploaded file is empty")
    if len(content) > settings.max_upload_bytes:
        raise InvalidInput(f"File exceeds {settings.max_upload_bytes // (1024 * 1024)} MB")

    text = await run_in_threadpool(extract_text_from_pdf, content)
    record_id = await run_in_threadpool(records.create, user.user_id, text, pdf.filename)
    logger.info("pdf_uploaded", record_id=record_id, filename=pdf.filename, chars=len(text))
    return {"text": text, "summaryId": record_id}


@router.get("/summaries")
def list_summaries(
    user: Identity = Depends(get_current_user),
    records: StudyRecordStore = Depends(get_records),
):
    return [record.to_public() for record in records.list_by_user(user.user_id)]


@router.delete("/summaries/{record_id}")
def delete_summary(
    record_id: str,
    user: Identity = Depends(get_current_user),
    records: StudyRecordStore = Depends(get_records),
):
    records.delete(record_id, user.user_id)
    return {"success": True, "message": "Summary deleted successfully."}
