"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from macro_tracker.api.models import (
    Credentials,
    EstimateRequest,
    MacroUpdateRequest,
    MealCreateRequest,
    MealUpdateRequest,
    ProfileUpdateRequest,
)
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer
from macro_tracker.domain.auth import AuthSession, AuthUser
from macro_tracker.domain.estimation import MealEstimate
from macro_tracker.domain.meals import MealDraft, MealRecord
from macro_tracker.domain.profiles import Profile
from macro_tracker.domain.summaries import (
    DateRange,
    DaySummary,
    Granularity,
    MacroTotals,
    WeekSummary,
)
from macro_tracker.services.aggregation import calorie_balance
from macro_tracker.services.auth import AuthError, log_auth_event
from macro_tracker.services.estimation import EstimationError
from macro_tracker.services.tracker import MealNotFoundError, TrackerView

Order = Literal["asc", "desc"]


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


def _bearer_token(authorization: str | None = Header(default=None)) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return token.strip()


async def require_user(
    token: str = Depends(_bearer_token),
    container: AppContainer = Depends(_get_container),
) -> AuthUser:
    """Resolve the bearer token to the signed-in user."""
    user = container.auth_service.get_user(token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user


def resolve_range(start: date | None = None, end: date | None = None) -> DateRange:
    """Build the active range from query parameters.

    A lone bound selects a single day; no bounds select today.
    """
    if start is None and end is None:
        start = end = date.today()
    elif start is None:
        start = end
    elif end is None:
        end = start
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )
    return DateRange(start=start, end=end)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        with state_container.auth_service.subscription(log_auth_event):
            yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/sign-in")
    async def sign_in(
        credentials: Credentials,
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Sign in with email and password."""
        try:
            session = state_container.auth_service.sign_in(
                credentials.email, credentials.password
            )
        except AuthError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
            ) from exc
        return _serialize_session(session)

    @app.post("/auth/sign-up")
    async def sign_up(
        credentials: Credentials,
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Register a new account."""
        try:
            session = state_container.auth_service.sign_up(
                credentials.email, credentials.password
            )
        except AuthError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        if session is None:
            return {
                "status": "confirmation_required",
                "message": "Check your email for the confirmation link!",
            }
        return {"status": "signed_in", "session": _serialize_session(session)}

    @app.post("/auth/sign-out")
    async def sign_out(
        token: str = Depends(_bearer_token),
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, str]:
        """Revoke the caller's session."""
        try:
            state_container.auth_service.sign_out(token)
        except AuthError as exc:
            logger.exception("Sign out failed")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {"status": "ok"}

    @app.get("/auth/session")
    async def current_session(
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Return the user behind the bearer token."""
        return {"user": _serialize_user(user)}

    @app.get("/tracker")
    async def tracker(  # noqa: PLR0913
        user: AuthUser = Depends(require_user),
        date_range: DateRange = Depends(resolve_range),
        granularity: Granularity = "day",
        order: Order = "desc",
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Return day, week and range summaries for the active range."""
        view = state_container.tracker_service.load_view(
            user.id, date_range, granularity, descending=order == "desc"
        )
        return _serialize_view(view)

    @app.post("/meals/estimate")
    async def estimate_meal(
        payload: EstimateRequest,
        user: AuthUser = Depends(require_user),
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Estimate macros for a meal description."""
        try:
            estimate = await state_container.estimation_service.estimate(
                payload.description
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except EstimationError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        logger.info("Estimated meal for user %s", user.id)
        return _serialize_estimate(estimate)

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal(  # noqa: PLR0913
        payload: MealCreateRequest,
        user: AuthUser = Depends(require_user),
        date_range: DateRange = Depends(resolve_range),
        granularity: Granularity = "day",
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Save a meal on the first day of the range."""
        try:
            view = state_container.tracker_service.add_meal(
                user.id,
                date_range,
                payload.estimate,
                name=payload.name,
                granularity=granularity,
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return _serialize_view(view)

    @app.put("/meals/{meal_id}")
    async def replace_meal(  # noqa: PLR0913
        meal_id: UUID,
        payload: MealUpdateRequest,
        user: AuthUser = Depends(require_user),
        date_range: DateRange = Depends(resolve_range),
        granularity: Granularity = "day",
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Replace a meal's fields."""
        draft = MealDraft(**payload.model_dump())
        try:
            view = state_container.tracker_service.edit_meal(
                user.id, meal_id, draft, date_range, granularity
            )
        except MealNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return _serialize_view(view)

    @app.patch("/meals/{meal_id}/macros")
    async def update_macros(  # noqa: PLR0913
        meal_id: UUID,
        payload: MacroUpdateRequest,
        user: AuthUser = Depends(require_user),
        date_range: DateRange = Depends(resolve_range),
        granularity: Granularity = "day",
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Hand-correct individual macros of a meal."""
        try:
            view = state_container.tracker_service.edit_macros(
                user.id,
                meal_id,
                payload.model_dump(exclude_none=True),
                date_range,
                granularity,
            )
        except MealNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return _serialize_view(view)

    @app.delete("/meals/{meal_id}")
    async def delete_meal(
        meal_id: UUID,
        user: AuthUser = Depends(require_user),
        date_range: DateRange = Depends(resolve_range),
        granularity: Granularity = "day",
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Delete a meal."""
        try:
            view = state_container.tracker_service.remove_meal(
                user.id, meal_id, date_range, granularity
            )
        except MealNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return _serialize_view(view)

    @app.get("/profile")
    async def get_profile(
        user: AuthUser = Depends(require_user),
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Return the caller's profile, creating it on first access."""
        return _serialize_profile(state_container.profile_service.get_profile(user.id))

    @app.patch("/profile")
    async def update_profile(
        payload: ProfileUpdateRequest,
        user: AuthUser = Depends(require_user),
        state_container: AppContainer = Depends(_get_container),
    ) -> dict[str, object]:
        """Set or clear the calorie target."""
        profile = state_container.profile_service.set_target(
            user.id, payload.target_calories
        )
        return _serialize_profile(profile)

    return app


def _serialize_user(user: AuthUser) -> dict[str, object]:
    return {"id": str(user.id), "email": user.email}


def _serialize_session(session: AuthSession) -> dict[str, object]:
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at,
        "user": _serialize_user(session.user),
    }


def _serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "user_id": str(profile.user_id),
        "target_calories": profile.target_calories,
    }


def _serialize_estimate(estimate: MealEstimate) -> dict[str, object]:
    payload = estimate.model_dump()
    payload["missing_fields"] = estimate.missing_fields()
    return payload


def _serialize_totals(totals: MacroTotals) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fats": totals.fats,
    }


def _serialize_meal(meal: MealRecord) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "description": meal.description,
        "date": meal.date.isoformat(),
        "calories": meal.calories,
        "protein": meal.protein,
        "carbs": meal.carbs,
        "fats": meal.fats,
        "analysis": meal.analysis,
        "created_at": meal.created_at.isoformat() if meal.created_at else None,
    }


def _serialize_day(day: DaySummary, target: int | None) -> dict[str, object]:
    return {
        "date": day.date.isoformat(),
        "totals": _serialize_totals(day.totals),
        "net_calories": day.net_calories,
        "balance": calorie_balance(day.net_calories, target),
        "meals": [_serialize_meal(meal) for meal in day.meals],
    }


def _serialize_week(week: WeekSummary, target: int | None) -> dict[str, object]:
    return {
        "start": week.start.isoformat(),
        "end": week.end.isoformat(),
        "totals": _serialize_totals(week.totals),
        "net_calories": week.net_calories,
        "balance": calorie_balance(week.net_calories, target),
        "days": [day.date.isoformat() for day in week.days],
    }


def _serialize_view(view: TrackerView) -> dict[str, object]:
    target = view.target_calories
    return {
        "range": {
            "start": view.date_range.start.isoformat()
            if view.date_range.start
            else None,
            "end": view.date_range.end.isoformat() if view.date_range.end else None,
        },
        "granularity": view.granularity,
        "target_calories": target,
        "totals": {
            **_serialize_totals(view.totals.totals),
            "net_calories": view.totals.net_calories,
            "day_count": view.totals.day_count,
            "balance": view.totals_balance,
        },
        "days": [_serialize_day(day, target) for day in view.days],
        "weeks": [_serialize_week(week, target) for week in view.weeks],
        "chart": [
            {
                "start": point.start.isoformat(),
                "end": point.end.isoformat(),
                "calories": point.calories,
                "protein": point.protein,
                "carbs": point.carbs,
                "fats": point.fats,
                "net_calories": point.net_calories,
                "balance": point.balance,
            }
            for point in view.chart
        ],
        "meals": [_serialize_meal(meal) for meal in view.meals],
    }
