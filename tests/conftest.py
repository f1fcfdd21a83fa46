"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.auth import AuthSession, AuthUser
from macro_tracker.domain.meals import MealDraft, MealRecord
from macro_tracker.domain.profiles import Profile
from macro_tracker.services.auth import (
    AuthError,
    AuthGateway,
    AuthListener,
    AuthService,
)
from macro_tracker.services.estimation import EstimationClient, EstimationService
from macro_tracker.services.meals import MealRepository, MealService
from macro_tracker.services.profiles import ProfileRepository, ProfileService
from macro_tracker.services.tracker import TrackerService

ESTIMATE_REPLY = (
    "```markdown\n"
    "## Nutrition breakdown\n"
    "Calories: **450 kcal**\n"
    "Protein: **30.5 g**\n"
    "Carbs: **50 g**\n"
    "Fats: **10 g**\n"
    "```"
)


def make_meal(  # noqa: PLR0913
    day: date,
    calories: float = 0,
    protein: float = 0,
    carbs: float = 0,
    fats: float = 0,
    owner_id: UUID | None = None,
    name: str = "Meal",
) -> MealRecord:
    """Build a meal record for tests."""
    return MealRecord(
        id=uuid4(),
        owner_id=owner_id or uuid4(),
        name=name,
        description=f"{name} description",
        date=day,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fats=fats,
        analysis="",
        created_at=datetime.now(tz=UTC),
    )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)
    list_calls: int = 0

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealRecord]:
        self.list_calls += 1
        matching = [
            meal
            for meal in self.meals.values()
            if meal.owner_id == user_id and start <= meal.date <= end
        ]
        return sorted(
            matching,
            key=lambda meal: meal.created_at or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        meal = self.meals.get(meal_id)
        if meal is None or meal.owner_id != user_id:
            return None
        return meal

    def create_meal(self, user_id: UUID, draft: MealDraft) -> MealRecord:
        meal = MealRecord(
            id=uuid4(),
            owner_id=user_id,
            name=draft.name,
            description=draft.description,
            date=draft.date,
            calories=draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fats=draft.fats,
            analysis=draft.analysis,
            created_at=datetime.now(tz=UTC),
        )
        self.meals[meal.id] = meal
        return meal

    def replace_meal(
        self, user_id: UUID, meal_id: UUID, draft: MealDraft
    ) -> MealRecord | None:
        current = self.get_meal(user_id, meal_id)
        if current is None:
            return None
        updated = replace(
            current,
            name=draft.name,
            description=draft.description,
            date=draft.date,
            calories=draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fats=draft.fats,
            analysis=draft.analysis,
        )
        self.meals[meal_id] = updated
        return updated

    def update_macros(
        self, user_id: UUID, meal_id: UUID, macros: dict[str, float]
    ) -> MealRecord | None:
        current = self.get_meal(user_id, meal_id)
        if current is None:
            return None
        updated = replace(current, **macros)
        self.meals[meal_id] = updated
        return updated

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        if self.get_meal(user_id, meal_id) is None:
            return False
        del self.meals[meal_id]
        return True


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    created: list[UUID] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def create_profile(self, user_id: UUID) -> Profile:
        profile = Profile(user_id=user_id, target_calories=None)
        self.profiles[user_id] = profile
        self.created.append(user_id)
        return profile

    def set_target_calories(self, user_id: UUID, target: int | None) -> Profile:
        profile = Profile(user_id=user_id, target_calories=target)
        self.profiles[user_id] = profile
        return profile


@dataclass
class FakeSubscription:
    """Subscription handle that records unsubscribes."""

    active: bool = True

    def unsubscribe(self) -> None:
        self.active = False


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake auth gateway with a fixed user table."""

    users: dict[str, tuple[str, AuthUser]] = field(default_factory=dict)
    tokens: dict[str, AuthUser] = field(default_factory=dict)
    confirm_sign_ups: bool = True
    subscriptions: list[FakeSubscription] = field(default_factory=list)
    listeners: list[AuthListener] = field(default_factory=list)
    signed_out: list[str] = field(default_factory=list)

    def add_user(self, email: str, password: str, token: str) -> AuthUser:
        user = AuthUser(id=uuid4(), email=email)
        self.users[email] = (password, user)
        self.tokens[token] = user
        return user

    def get_user(self, access_token: str) -> AuthUser | None:
        if access_token == "broken":
            raise AuthError("invalid JWT")
        return self.tokens.get(access_token)

    def sign_in(self, email: str, password: str) -> AuthSession:
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise AuthError("Invalid login credentials")
        session = _session_for(stored[1])
        self.tokens[session.access_token] = stored[1]
        self._emit("SIGNED_IN", session)
        return session

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        if email in self.users:
            raise AuthError("User already registered")
        user = AuthUser(id=uuid4(), email=email)
        self.users[email] = (password, user)
        if self.confirm_sign_ups:
            return None
        session = _session_for(user)
        self.tokens[session.access_token] = user
        return session

    def sign_out(self, access_token: str) -> None:
        self.tokens.pop(access_token, None)
        self.signed_out.append(access_token)
        self._emit("SIGNED_OUT", None)

    def on_auth_state_change(self, listener: AuthListener) -> FakeSubscription:
        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        self.listeners.append(listener)
        return subscription

    def _emit(self, event: str, session: AuthSession | None) -> None:
        for listener, subscription in zip(
            self.listeners, self.subscriptions, strict=True
        ):
            if subscription.active:
                listener(event, session)


def _session_for(user: AuthUser) -> AuthSession:
    return AuthSession(
        access_token=f"token-{uuid4()}",
        refresh_token="refresh",
        expires_at=None,
        user=user,
    )


@dataclass
class FakeEstimationClient(EstimationClient):
    """Fake estimation client returning a fixed reply."""

    reply: str = ESTIMATE_REPLY
    error: Exception | None = None
    descriptions: list[str] = field(default_factory=list)

    async def estimate(self, description: str) -> str:
        self.descriptions.append(description)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        estimation_api_key="mira-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def estimation_client() -> FakeEstimationClient:
    return FakeEstimationClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    profile_repository: InMemoryProfileRepository,
    auth_gateway: FakeAuthGateway,
    estimation_client: FakeEstimationClient,
) -> AppContainer:
    meal_service = MealService(meal_repository)
    profile_service = ProfileService(profile_repository)
    tracker_service = TrackerService(
        meal_service=meal_service,
        profile_service=profile_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_gateway),
        estimation_service=EstimationService(client=estimation_client),
        meal_service=meal_service,
        profile_service=profile_service,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )
