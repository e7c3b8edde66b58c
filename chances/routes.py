"""
Chances API Routes

Exposes the chances engine via REST API.
Every endpoint requires a bearer token whose `sub` is the user id.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from db import get_db
from models.models_user import User
from utils.auth_utils import decode_token
from .ai.llm_client import LLMClient
from .logic.adapter import ChancesRepository
from .logic.constants import ChancesMode, DEFAULT_MODE
from .logic.engine import ChancesEngine
from .logic.errors import ChancesAssessmentError, SchoolNotFoundError, UsageLimitExceededError
from .logic.usage import UsageCheck, check_usage, record_usage, require_quota

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chances", tags=["chances"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class _CamelRequest(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ChancesRequest(_CamelRequest):
    """Request body for a single-school assessment."""
    school_id: str = Field(..., min_length=1, description="Target school id")
    mode: ChancesMode = Field(default=DEFAULT_MODE, description="current | projected | simulated")
    strategy: Literal["holistic", "legacy"] = "holistic"
    compare: bool = Field(default=False, description="Attach the current-vs-projected comparison")

    @model_validator(mode="after")
    def check_compare(self):
        if self.compare and self.strategy != "holistic":
            raise ValueError("compare is only available with the holistic strategy")
        if self.compare and "mode" in self.model_fields_set and self.mode != ChancesMode.PROJECTED:
            raise ValueError("compare always returns the projected result; omit mode or send 'projected'")
        return self


class BatchChancesRequest(_CamelRequest):
    school_ids: List[str] = Field(..., min_length=1)
    mode: ChancesMode = DEFAULT_MODE
    strategy: Literal["holistic", "legacy"] = "holistic"


class RefreshRequest(_CamelRequest):
    mode: ChancesMode = DEFAULT_MODE
    strategy: Literal["holistic", "legacy"] = "holistic"


class CurrentUser(BaseModel):
    id: str
    email: str
    subscription_tier: str


# =============================================================================
# DEPENDENCIES
# =============================================================================

def auth_user(
    authorization: Optional[str] = Header(default=None),
    db_session=Depends(get_db, use_cache=False),
) -> CurrentUser:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except Exception as e:
        logger.error(f"Token decode failed: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    user_id = data.get("sub")
    db: Session
    with db_session as db:
        user = db.get(User, user_id) if user_id else None
        if not user:
            logger.error(f"User not found for id: {user_id}")
            raise HTTPException(status_code=401, detail=f"User not found for id: {user_id}")
        return CurrentUser(id=user.id, email=user.email, subscription_tier=user.subscription_tier)


def load_llm_client() -> Optional[LLMClient]:
    """LLMClient from env, or None when no API key is configured."""
    try:
        return LLMClient.from_env()
    except RuntimeError as e:
        logger.warning(f"⚠️ LLM client unavailable, legacy strategy will use quantitative estimates: {e}")
        return None


def get_llm_client(request: Request) -> Optional[LLMClient]:
    """The app-wide client created at startup (created on first use otherwise)."""
    state = request.app.state
    if not hasattr(state, "llm_client"):
        state.llm_client = load_llm_client()
    return state.llm_client


def _require_llm(llm: Optional[LLMClient], strategy: str) -> None:
    # The legacy refiner degrades to the quantitative estimate without a client.
    if llm is None and strategy == "holistic":
        raise HTTPException(
            status_code=503,
            detail={"error": "Holistic assessment unavailable: no LLM client configured", "retryable": False},
        )


def _parse(model, payload: Dict[str, Any]):
    try:
        return model.model_validate(payload or {})
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {e.errors()}")


def _load_user_and_profile(db: Session, current: CurrentUser):
    user = db.get(User, current.id)
    profile = ChancesRepository(db).profile_for_user(current.id)
    if user is None or profile is None:
        raise HTTPException(status_code=401, detail="No student profile for this user")
    return user, profile


def _require_quota(user: User, needed: int = 1) -> None:
    try:
        require_quota(check_usage(user), needed)
    except UsageLimitExceededError as e:
        logger.info(f"Usage limit hit for user {user.id}: {e}")
        raise HTTPException(
            status_code=403,
            detail={"error": str(e), "used": e.used, "limit": e.limit},
        )


def _assessment_failed(e: ChancesAssessmentError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": str(e), "retryable": e.retryable})


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", summary="Assess admission chances at one school")
@router.post("/", summary="Assess admission chances at one school", include_in_schema=False)
async def calculate_chances(
    payload: Dict[str, Any] = Body(...),
    current: CurrentUser = Depends(auth_user),
    llm: Optional[LLMClient] = Depends(get_llm_client),
    db_session=Depends(get_db, use_cache=False),
):
    """
    **Request Body:**
    - `schoolId`: Target school
    - `mode`: current | projected | simulated (default: projected)
    - `strategy`: holistic | legacy (default: holistic)
    - `compare`: return the projected result with the current-mode probability
      attached (holistic only; `mode` must be omitted or `projected`)
    """
    request = _parse(ChancesRequest, payload)
    _require_llm(llm, request.strategy)
    db: Session
    with db_session as db:
        user, profile = _load_user_and_profile(db, current)
        _require_quota(user)

        engine = ChancesEngine(ChancesRepository(db), llm)
        try:
            if request.compare:
                result = await engine.calculate_with_comparison(profile.id, request.school_id)
            else:
                result = await engine.calculate_chances(
                    profile.id, request.school_id, mode=request.mode, strategy=request.strategy
                )
        except SchoolNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ChancesAssessmentError as e:
            return _assessment_failed(e)
        except Exception as e:
            logger.exception(f"Chances calculation failed: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        record_usage(db, user)
        return result.model_dump(by_alias=True, mode="json")


@router.post("/batch", summary="Assess admission chances at several schools")
async def calculate_chances_batch(
    payload: Dict[str, Any] = Body(...),
    current: CurrentUser = Depends(auth_user),
    llm: Optional[LLMClient] = Depends(get_llm_client),
    db_session=Depends(get_db, use_cache=False),
):
    """Schools that fail are left out of `results`."""
    request = _parse(BatchChancesRequest, payload)
    _require_llm(llm, request.strategy)
    db: Session
    with db_session as db:
        user, profile = _load_user_and_profile(db, current)
        school_ids = list(dict.fromkeys(request.school_ids))
        _require_quota(user, needed=len(school_ids))

        engine = ChancesEngine(ChancesRepository(db), llm)
        try:
            results = await engine.calculate_chances_multiple(
                profile.id, school_ids, mode=request.mode, strategy=request.strategy
            )
        except Exception as e:
            logger.exception(f"Batch chances calculation failed: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        for _ in results:
            record_usage(db, user)
        return {
            "results": {sid: r.model_dump(by_alias=True, mode="json") for sid, r in results.items()},
            "count": len(results),
            "failed": [sid for sid in school_ids if sid not in results],
        }


@router.post("/refresh", summary="Recompute cached chances on the school list")
async def refresh_stored_chances(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    current: CurrentUser = Depends(auth_user),
    llm: Optional[LLMClient] = Depends(get_llm_client),
    db_session=Depends(get_db, use_cache=False),
):
    request = _parse(RefreshRequest, payload)
    _require_llm(llm, request.strategy)
    db: Session
    with db_session as db:
        user, profile = _load_user_and_profile(db, current)
        repository = ChancesRepository(db)
        linked = repository.linked_school_list(profile.id)
        _require_quota(user, needed=len({row.school_id for row in linked}))

        engine = ChancesEngine(repository, llm)
        try:
            updated = await engine.update_stored_chances(profile.id, mode=request.mode, strategy=request.strategy)
        except Exception as e:
            logger.exception(f"Chances refresh failed: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        for _ in range(updated):
            record_usage(db, user)
        return {"updated": updated, "total": len(linked)}


@router.get("/usage", response_model=UsageCheck, summary="Monthly chances usage")
def get_usage(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db, use_cache=False)):
    db: Session
    with db_session as db:
        user = db.get(User, current.id)
        return check_usage(user)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Chances engine health check")
def health_check():
    """Check if the chances engine is operational."""
    return {"status": "ok", "engine": "chances", "version": "1.0.0"}
