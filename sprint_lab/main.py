"""
Sprint Lab - FastAPI application for the Sprint Final sales campaign

Features:
- Distributor registration/login with session tokens
- Daily self-reported activity logs and personal dashboard
- Team leaderboard ranked by admin-confirmed (official) sales
- Sales coach chat (Gemini when configured, local keyword RAG otherwise)
- Partner API sync (distributors and campaign orders)

Storage: PostgreSQL (asyncpg) when DATABASE_URL is set, with a local JSON
store as fallback, so the app keeps working offline.
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    print(f"Loading environment from: {env_local}")
    load_dotenv(env_local, override=True)
elif env_file.exists():
    print(f"Loading environment from: {env_file}")
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from sprint_lab.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
setup_logging(
    log_file="logs/sprint-lab.log",
    console_level=getattr(logging, log_level, logging.INFO),
    file_level=logging.DEBUG,
)

logger = logging.getLogger(__name__)


from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .auth import create_session_token, get_current_user, get_current_user_optional, require_admin
from .campaign import DAILY_TARGET_PAIRS, PROFIT_PER_PAIR, project_potential
from .coach import Coach, create_coach
from .models import DailyLog, ServiceResult, User
from .rag import LocalRetrievalEngine
from .services import TrackerService
from .store import create_store
from .sync import SyncOrchestrator, orders_to_official_sales

PORT = int(os.getenv("PORT", "8080"))

APP_VERSION = "1.0.0"
APP_START_TIME = datetime.utcnow().isoformat() + "Z"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources"""
    logger.info("Initializing data store...")
    store = await create_store()
    app.state.tracker = TrackerService(store)

    engine = LocalRetrievalEngine.from_document()
    app.state.engine = engine
    app.state.coach = create_coach(engine)
    app.state.sync = SyncOrchestrator()
    logger.info("Sprint Lab ready")

    yield

    logger.info("Shutting down...")
    app.state.coach.close()
    await store.close()


app = FastAPI(
    title="Sprint Lab API",
    description="Sales campaign tracker: self-reported logs, official sales ranking and sales coach",
    version=APP_VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={"persistAuthorization": True},
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependencies
def get_tracker(request: Request) -> TrackerService:
    return request.app.state.tracker


def get_coach(request: Request) -> Coach:
    return request.app.state.coach


def get_sync(request: Request) -> SyncOrchestrator:
    return request.app.state.sync


def _unwrap(result: ServiceResult, status_code: int = status.HTTP_400_BAD_REQUEST) -> Any:
    """Data of a successful result, HTTPException otherwise"""
    if not result.success:
        raise HTTPException(status_code=status_code, detail=result.error)
    return result.data


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    coach_providers: List[str]


class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name")
    whatsapp: str = Field(..., description="WhatsApp number (digits, with area code)")
    password: str = Field(..., description="Password (min 6 characters)")


class LoginRequest(BaseModel):
    identifier: str = Field(..., description="WhatsApp number (or admin login)")
    password: str


class UserResponse(BaseModel):
    id: str
    name: str
    whatsapp: str = ""
    role: str
    created_at: str = ""


class SessionResponse(BaseModel):
    token: str
    user: UserResponse


class LogCreateRequest(BaseModel):
    date: str = Field("", description="dd/mm/yyyy (default: today)")
    pairs_sold: int = 0
    prospects_contacted: int = 0
    activations: int = 0
    type: str = "mixed"


class LogResponse(BaseModel):
    id: str
    user_id: str
    date: str
    pairs_sold: int
    prospects_contacted: int
    activations: int
    type: str


class ChartPointResponse(BaseModel):
    name: str
    sales: int


class DashboardResponse(BaseModel):
    total_pairs: int
    estimated_profit: float
    chart: List[ChartPointResponse]


class TeamMemberResponse(BaseModel):
    id: str
    name: str
    total_official_sales: int
    self_reported_sales: int
    score: int
    is_current_user: bool


class ChatRequest(BaseModel):
    message: str = Field(..., description="Question for the coach (or /test)")


class ChatResponse(BaseModel):
    text: str
    provider: str
    is_local: bool


class QuickActionInfo(BaseModel):
    index: int
    label: str
    question: str


class QuickActionResponse(BaseModel):
    label: str
    question: str
    answer: ChatResponse


class ProfitProjectionResponse(BaseModel):
    pairs_per_day: int
    profit_per_pair: float
    days_remaining: int
    total_potential: float


class OfficialSaleRequest(BaseModel):
    distributor_id: str
    quantity: int


class OfficialSaleResponse(BaseModel):
    id: str
    distributor_id: str
    quantity: int
    date: str
    timestamp: int


class SyncResponse(BaseModel):
    success: bool
    message: str
    payloads: List[Dict[str, Any]] = []
    official_sales: List[OfficialSaleResponse] = []


def _user_response(user: User) -> UserResponse:
    return UserResponse(**asdict(user))


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Sprint Lab API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health(coach: Coach = Depends(get_coach)):
    """Health check endpoint"""
    start_time = datetime.fromisoformat(APP_START_TIME.rstrip('Z'))
    uptime = (datetime.utcnow() - start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME,
        uptime_seconds=round(uptime, 2),
        coach_providers=[provider.name for provider in coach.chain.providers],
    )


@app.post("/v1/auth/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, tracker: TrackerService = Depends(get_tracker)):
    """
    Register a distributor and open a session

    Example:
        POST /v1/auth/register
        {"name": "Maria", "whatsapp": "(11) 98765-4321", "password": "segredo1"}
    """
    user = _unwrap(await tracker.register_user(request.name, request.whatsapp, request.password))
    return SessionResponse(token=create_session_token(user), user=_user_response(user))


@app.post("/v1/auth/login", response_model=SessionResponse)
async def login(request: LoginRequest, tracker: TrackerService = Depends(get_tracker)):
    result = await tracker.authenticate_user(request.identifier, request.password)
    user = _unwrap(result, status.HTTP_401_UNAUTHORIZED)
    logger.info(f"Login: user={user.id} role={user.role}")
    return SessionResponse(token=create_session_token(user), user=_user_response(user))


@app.get("/v1/logs", response_model=List[LogResponse])
async def list_logs(
    user: User = Depends(get_current_user),
    tracker: TrackerService = Depends(get_tracker),
):
    """Self-reported logs of the session user, in submission order"""
    logs = _unwrap(await tracker.get_logs(user.id), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return [LogResponse(**asdict(log)) for log in logs]


@app.post("/v1/logs", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    request: LogCreateRequest,
    user: User = Depends(get_current_user),
    tracker: TrackerService = Depends(get_tracker),
):
    """
    Submit a daily activity log

    Each submission is a separate record (several per day are allowed).
    """
    log = DailyLog(
        id="",
        user_id=user.id,
        date=request.date,
        pairs_sold=request.pairs_sold,
        prospects_contacted=request.prospects_contacted,
        activations=request.activations,
        type=request.type,
    )
    saved = _unwrap(await tracker.save_log(log))
    return LogResponse(**asdict(saved))


@app.get("/v1/dashboard", response_model=DashboardResponse)
async def dashboard(
    user: User = Depends(get_current_user),
    tracker: TrackerService = Depends(get_tracker),
):
    summary = _unwrap(await tracker.get_dashboard(user.id), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return DashboardResponse(**asdict(summary))


@app.get("/v1/leaderboard", response_model=List[TeamMemberResponse])
async def leaderboard(
    user: Optional[User] = Depends(get_current_user_optional),
    tracker: TrackerService = Depends(get_tracker),
):
    """
    Team ranking by official sales

    Works without a session; with one, the caller's row is flagged.
    """
    members = _unwrap(
        await tracker.get_leaderboard(user.id if user else None),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return [TeamMemberResponse(**asdict(member)) for member in members]


@app.post("/v1/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user: Optional[User] = Depends(get_current_user_optional),
    coach: Coach = Depends(get_coach),
):
    """
    Ask the sales coach

    "/test" runs the local retrieval diagnostic instead of answering.
    """
    answer = await coach.ask(request.message, user.name if user else "")
    return ChatResponse(**asdict(answer))


@app.get("/v1/chat/quick-actions", response_model=List[QuickActionInfo])
async def list_quick_actions(coach: Coach = Depends(get_coach)):
    return [
        QuickActionInfo(index=index, label=action.label, question=action.question)
        for index, action in enumerate(coach.quick_actions)
    ]


@app.post("/v1/chat/quick-actions/{index}", response_model=QuickActionResponse)
async def run_quick_action(index: int, coach: Coach = Depends(get_coach)):
    """Scripted answer; repeated calls rotate through the action's variations"""
    if not 0 <= index < len(coach.quick_actions):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Quick action {index} not found")

    action = coach.quick_actions[index]
    answer = coach.quick_action(action.label)
    if answer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Quick action {index} has no answers")

    return QuickActionResponse(label=action.label, question=action.question, answer=ChatResponse(**asdict(answer)))


@app.get("/v1/calculator", response_model=ProfitProjectionResponse)
async def calculator(
    pairs_per_day: int = Query(DAILY_TARGET_PAIRS, ge=0, le=100),
    profit_per_pair: float = Query(PROFIT_PER_PAIR, ge=0),
    days: Optional[int] = Query(None, ge=0, description="Override remaining campaign days"),
):
    """Profit reachable by holding a daily pace until the campaign ends"""
    return ProfitProjectionResponse(**asdict(project_potential(pairs_per_day, profit_per_pair, days)))


# Admin routes
@app.post(
    "/v1/official-sales",
    response_model=OfficialSaleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_official_sale(request: OfficialSaleRequest, tracker: TrackerService = Depends(get_tracker)):
    sale = _unwrap(await tracker.add_official_sale(request.distributor_id, request.quantity))
    return OfficialSaleResponse(**asdict(sale))


@app.get("/v1/users", response_model=List[UserResponse], dependencies=[Depends(require_admin)])
async def list_users(tracker: TrackerService = Depends(get_tracker)):
    users = _unwrap(await tracker.list_users(), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return [_user_response(user) for user in users]


@app.post("/v1/sync", response_model=SyncResponse, dependencies=[Depends(require_admin)])
async def sync_partner(orchestrator: SyncOrchestrator = Depends(get_sync)):
    """
    Fetch distributors and campaign orders from the partner API

    Paid orders are returned as official-sale candidates; they are not saved.
    """
    result = await orchestrator.sync()
    if not result.success:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)

    orders = next((p["data"] for p in result.payloads if p["source"] == "pedidos"), [])
    candidates = orders_to_official_sales(orders)

    return SyncResponse(
        success=True,
        message=result.message,
        payloads=result.payloads,
        official_sales=[OfficialSaleResponse(**asdict(sale)) for sale in candidates],
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sprint_lab.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,
    )
