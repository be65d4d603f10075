from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import structlog

from tutor.application.api.schema import (
    ChatRequest, ChatResponse, ErrorResponse, EventAccepted, StudentReport
)
from tutor.domain.errors import TutorError
from tutor.domain.student.telemetry_subscriber import TelemetryEvent

logger = structlog.get_logger(__name__)

router = APIRouter()

GENERIC_FAILURE = "The tutor could not answer right now. Please try again."


@router.post("/chat", response_model=ChatResponse, responses={500: {"model": ErrorResponse}})
async def chat_endpoint(request: ChatRequest, http_request: Request):
    """Chat with the personal tutor"""

    services = http_request.app.state
    mode = await services.student_states.get_mode(request.student_id)

    try:
        result = await services.tutor_agent.run(request.student_id, request.message, mode)
    except TutorError as e:
        logger.error("Tutor run failed", kind=e.kind, error=str(e), student_id=request.student_id)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=GENERIC_FAILURE, kind=e.kind).model_dump()
        )
    except Exception as e:
        logger.exception("Unexpected tutor failure", error=str(e), student_id=request.student_id)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=GENERIC_FAILURE, kind="internal_error").model_dump()
        )

    return ChatResponse(response=result.response, mode=result.mode)


@router.post("/events", status_code=202, response_model=EventAccepted)
async def events_endpoint(event: TelemetryEvent, http_request: Request):
    """Handle incoming telemetry events"""

    await http_request.app.state.telemetry.handle_event(event)
    return EventAccepted()


@router.get("/student/{student_id}/summary", response_model=StudentReport)
async def student_summary(student_id: str, http_request: Request):
    """Student progress summary"""

    report = await http_request.app.state.reporting.generate_student_report(student_id)
    return StudentReport(report=report)
