from typing import Optional
from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from tutor.application.api.route.chat import router as chat_router
from tutor.config import Settings, get_settings
from tutor.domain.context.memory.memory_provider import MemoryProvider, NullMemoryProvider
from tutor.domain.context.state.student_state_store import StudentStateStore
from tutor.domain.generation.model_capability import ModelCapability, build_openai_capability
from tutor.domain.orchestration.core.tutor_agent import TutorAgent
from tutor.domain.student.reporting_service import ReportingService
from tutor.domain.student.telemetry_subscriber import TelemetrySubscriber
from tutor.domain.tool.tool_registry import ToolRegistry
from tutor.domain.tool.tutor_tools import build_tutor_tools
from tutor.infrastructure.observability.logging import setup_logging

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    model: Optional[ModelCapability] = None,
    memory: Optional[MemoryProvider] = None,
    student_states: Optional[StudentStateStore] = None,
    tutor_agent: Optional[TutorAgent] = None
) -> FastAPI:
    """Wire the tutor service; every collaborator can be injected"""

    settings = settings or get_settings()
    student_states = student_states or StudentStateStore()

    if tutor_agent is None:
        registry = ToolRegistry(build_tutor_tools(settings, student_states))
        tutor_agent = TutorAgent.from_settings(
            settings,
            model=model or build_openai_capability(settings.model_name, settings.openai_api_key),
            memory=memory or NullMemoryProvider(),
            registry=registry
        )

    app = FastAPI(title="Personal AI Tutor")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.student_states = student_states
    app.state.tutor_agent = tutor_agent
    app.state.telemetry = TelemetrySubscriber(student_states, settings.help_click_threshold)
    app.state.reporting = ReportingService(student_states)

    app.include_router(chat_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "timestamp": datetime.utcnow().isoformat()
        }

    return app


def main():
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.service_name)
    logger.info("Starting tutor service", port=settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
