"""Tests for the storefront session and view routing."""

import pytest

from storefront.session import (
    AUTH_PATH,
    AccountVariant,
    RouteDecision,
    Session,
    SessionError,
    ViewRouter,
)

INDIVIDUAL_LOGIN = {"token": "tok-1", "user": {"id": 42, "nom": "Dupont", "raison_soc": "Particulier"}}
PRO_LOGIN = {"token": "tok-2", "user": {"id": 7, "nom": "ACME", "raison_soc": "Professionnel"}}


class TestAccountVariant:
    @pytest.mark.parametrize(
        "profile, expected",
        [
            ({"raison_soc": "Professionnel"}, AccountVariant.PROFESSIONAL),
            ({"raison_soc": "Particulier"}, AccountVariant.INDIVIDUAL),
            ({"account_type": "professional"}, AccountVariant.PROFESSIONAL),
            ({"role": "seller"}, AccountVariant.PROFESSIONAL),
            ({}, AccountVariant.INDIVIDUAL),
            (None, AccountVariant.INDIVIDUAL),
        ],
    )
    def test_from_profile(self, profile, expected):
        assert AccountVariant.from_profile(profile) is expected

    def test_raison_soc_wins(self):
        profile = {"raison_soc": "Particulier", "role": "seller"}
        assert AccountVariant.from_profile(profile) is AccountVariant.INDIVIDUAL


class TestSession:
    def test_start(self):
        session = Session.start(INDIVIDUAL_LOGIN)
        assert session.is_authenticated
        assert session.token == "tok-1"
        assert session.user_id == 42
        assert session.variant is AccountVariant.INDIVIDUAL
        assert session.cart.is_empty
        assert session.cart.owner_id == "42"

    def test_start_without_token(self):
        with pytest.raises(SessionError):
            Session.start({"user": {"id": 1}})

    def test_cart_is_shared_by_reference(self):
        session = Session.start(INDIVIDUAL_LOGIN)
        cart = session.cart
        cart.add({"id": 1, "name": "Clavier", "price": 10})
        assert len(session.cart.items) == 1

    def test_end_drops_everything(self):
        session = Session.start(PRO_LOGIN)
        session.end()
        assert not session.is_authenticated
        assert session.profile == {}
        assert session.variant is None
        assert session.cart is None


class TestViewRouter:
    def setup_method(self):
        self.router = ViewRouter()

    def test_anonymous_on_protected_path_goes_to_auth(self):
        decision = self.router.resolve(None, "/panier")
        assert decision == RouteDecision(redirect=AUTH_PATH, from_path="/panier")
        assert decision.is_redirect

    def test_anonymous_on_auth_page(self):
        assert self.router.resolve(Session(), "/auth") == RouteDecision(view="auth")

    def test_anonymous_on_root(self):
        assert self.router.resolve(None, "/") == RouteDecision(view="auth")

    def test_authenticated_on_public_only_path_goes_home(self):
        assert self.router.resolve(Session.start(INDIVIDUAL_LOGIN), "/auth").redirect == "/home"
        assert self.router.resolve(Session.start(PRO_LOGIN), "/").redirect == "/dashboard"

    def test_individual_views(self):
        session = Session.start(INDIVIDUAL_LOGIN)
        assert self.router.resolve(session, "/panier") == RouteDecision(view="cart")
        assert self.router.resolve(session, "/produits/") == RouteDecision(view="shop")

    def test_professional_views(self):
        session = Session.start(PRO_LOGIN)
        assert self.router.resolve(session, "/dashboard") == RouteDecision(view="dashboard")
        assert self.router.resolve(session, "/performances?range=30d") == RouteDecision(view="performances")

    def test_view_of_other_variant_redirects_home(self):
        assert self.router.resolve(Session.start(PRO_LOGIN), "/panier").redirect == "/dashboard"
        assert self.router.resolve(Session.start(INDIVIDUAL_LOGIN), "/dashboard").redirect == "/home"

    def test_unknown_path_redirects_home(self):
        assert self.router.resolve(Session.start(INDIVIDUAL_LOGIN), "/nowhere").redirect == "/home"

    def test_after_login_returns_to_requested_view(self):
        session = Session.start(INDIVIDUAL_LOGIN)
        assert self.router.after_login(session, "/panier").redirect == "/panier"

    def test_after_login_ignores_foreign_view(self):
        session = Session.start(INDIVIDUAL_LOGIN)
        assert self.router.after_login(session, "/dashboard").redirect == "/home"
        assert self.router.after_login(session).redirect == "/home"
