"""Storefront session and role-based view routing.

A ``Session`` is the single owner of per-visitor view state: the auth
token, the profile returned by the login endpoint, the account variant
and the visitor's cart. Views get the session by reference and change the
cart only through ``Cart`` operations.

``ViewRouter`` decides which view a path renders. Each account variant
has its own ``ViewSet``, so role checks live in one table.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

import structlog

from shopping.cart.cart import Cart

logger = structlog.get_logger(__name__)

AUTH_PATH = "/auth"


class AccountVariant(Enum):
    INDIVIDUAL = "Particulier"
    PROFESSIONAL = "Professionnel"

    @classmethod
    def from_profile(cls, profile: Mapping | None) -> "AccountVariant":
        """Resolve the variant from ``raison_soc``, ``account_type`` or ``role``."""
        profile = profile or {}
        for name in ("raison_soc", "account_type", "role"):
            value = profile.get(name)
            if not value:
                continue
            text = str(value).strip().lower()
            if text in ("professionnel", "professional", "pro", "seller", "vendeur"):
                return cls.PROFESSIONAL
            if text in ("particulier", "individual", "customer", "client"):
                return cls.INDIVIDUAL
        return cls.INDIVIDUAL


class SessionError(Exception):
    """Raised when a session cannot be started from the login response."""


@dataclass
class Session:
    token: str | None = None
    profile: dict = field(default_factory=dict)
    variant: AccountVariant | None = None
    cart: Cart | None = None

    @classmethod
    def start(cls, auth: Mapping) -> "Session":
        """Open a session from a login response ``{"token": ..., "user": {...}}``.

        Must run inside the shopping domain context since it creates the cart.
        """
        token = (auth or {}).get("token")
        if not token:
            raise SessionError("Login response carries no token")

        profile = dict(auth.get("user") or {})
        variant = AccountVariant.from_profile(profile)
        user_id = profile.get("id")
        session = cls(
            token=str(token),
            profile=profile,
            variant=variant,
            cart=Cart.create(owner_id=str(user_id) if user_id is not None else None),
        )
        logger.info("Session started", user_id=user_id, variant=variant.value)
        return session

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_id(self):
        return self.profile.get("id")

    def end(self) -> None:
        logger.info("Session ended", user_id=self.user_id)
        self.token = None
        self.profile = {}
        self.variant = None
        self.cart = None


@dataclass(frozen=True)
class ViewSet:
    home: str
    views: Mapping[str, str]


@dataclass(frozen=True)
class RouteDecision:
    view: str | None = None
    redirect: str | None = None
    from_path: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


PUBLIC_ONLY_PATHS = frozenset({"/", AUTH_PATH})

VIEW_SETS = {
    AccountVariant.INDIVIDUAL: ViewSet(
        home="/home",
        views={
            "/home": "home",
            "/produits": "shop",
            "/panier": "cart",
            "/paiement": "checkout",
        },
    ),
    AccountVariant.PROFESSIONAL: ViewSet(
        home="/dashboard",
        views={
            "/dashboard": "dashboard",
            "/catalogue": "catalog",
            "/performances": "performances",
        },
    ),
}


def _normalize_path(path: str | None) -> str:
    path = (path or "/").split("?", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path


class ViewRouter:
    def __init__(self, view_sets=None, public_only=PUBLIC_ONLY_PATHS, auth_path: str = AUTH_PATH) -> None:
        self.view_sets = view_sets or VIEW_SETS
        self.public_only = frozenset(public_only)
        self.auth_path = auth_path

    def view_set_for(self, session: Session) -> ViewSet:
        return self.view_sets[session.variant or AccountVariant.INDIVIDUAL]

    def resolve(self, session: Session | None, path: str) -> RouteDecision:
        path = _normalize_path(path)

        if session is None or not session.is_authenticated:
            if path in self.public_only:
                return RouteDecision(view="auth")
            return RouteDecision(redirect=self.auth_path, from_path=path)

        view_set = self.view_set_for(session)
        if path in self.public_only:
            return RouteDecision(redirect=view_set.home)

        view = view_set.views.get(path)
        if view is None:
            return RouteDecision(redirect=view_set.home)
        return RouteDecision(view=view)

    def after_login(self, session: Session, from_path: str | None = None) -> RouteDecision:
        """Where to go once logged in: the originally requested view, else home."""
        view_set = self.view_set_for(session)
        if from_path:
            path = _normalize_path(from_path)
            if path in view_set.views:
                return RouteDecision(redirect=path)
        return RouteDecision(redirect=view_set.home)
