"""
Tests for API layer.

Tests:
- API service methods
- Request translation
- HTTP routes and status codes
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import ActionRequest, CreateGameRequest, ErrorCode, ErrorResponse, SaleModel
from ..api.service import APIService, RequestError, to_action
from ..config import Settings
from ..engine_core.action import ActionType
from ..engine_core.enums import IndustryType


def pass_request(game):
    """An ActionRequest passing with the current player's first card."""
    player = next(p for p in game.players if p.is_current_turn)
    return ActionRequest(action_type="pass", player_id=player.player_id, card_id=player.hand[0].card_id)


class TestToAction:
    """Tests for turning requests into engine actions."""

    def test_unknown_type(self):
        """An unrecognised action type is UNKNOWN_ACTION."""
        with pytest.raises(RequestError) as exc:
            to_action(ActionRequest(action_type="teleport", player_id="a", card_id="c"))
        assert exc.value.error_code == ErrorCode.UNKNOWN_ACTION

    def test_build_needs_location(self):
        """A build without a location cannot be built."""
        with pytest.raises(RequestError):
            to_action(ActionRequest(action_type="build", player_id="a", card_id="c", industry_type="pottery"))

    def test_build(self):
        """Build requests carry their location and industry."""
        action = to_action(ActionRequest(
            action_type="build", player_id="a", card_id="c",
            location="BELPER", industry_type="cotton_mill",
        ))
        assert action.action_type == ActionType.BUILD
        assert action.payload.location == "BELPER"
        assert action.payload.industry_type == IndustryType.COTTON_MILL

    def test_sale_beer_sources(self):
        """Nominated beer keys become a tuple, omitted ones stay None."""
        action = to_action(ActionRequest(
            action_type="sell", player_id="a", card_id="c",
            sales=[
                SaleModel(tile_id="t1", merchant_id="m1", beer_sources=["tile:t9"]),
                SaleModel(tile_id="t2", merchant_id="m1"),
            ],
        ))
        assert action.payload.sales[0].beer_sources == ("tile:t9",)
        assert action.payload.sales[1].beer_sources is None


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    def test_create_game(self, service):
        """Can create a game with a seed."""
        response = service.create_game(CreateGameRequest(player_ids=["alice", "bob"], seed=42))

        assert response.game_id
        assert response.phase == "playing"
        assert response.era == "canal"
        assert response.round == 1
        assert response.max_rounds == 10
        assert sorted(response.turn_order) == ["alice", "bob"]
        assert all(len(p.hand) == 8 for p in response.players)
        assert sum(p.is_current_turn for p in response.players) == 1

    def test_duplicate_players_rejected(self, service):
        """Setup errors come back as SETUP_ERROR."""
        response = service.create_game(CreateGameRequest(player_ids=["alice", "alice"]))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SETUP_ERROR

    def test_get_nonexistent_game(self, service):
        """Getting nonexistent game returns error."""
        response = service.get_game("nonexistent-id")

        assert hasattr(response, "error")
        assert response.error_code == ErrorCode.GAME_NOT_FOUND

    def test_submit_pass(self, service):
        """A legal action succeeds and returns the new game view."""
        game = service.create_game(CreateGameRequest(player_ids=["alice", "bob"], seed=1))
        request = pass_request(game)

        response = service.submit_action(game.game_id, request)

        assert response.success
        assert response.game.current_player_id != request.player_id
        assert [c.type for c in response.state_changes][0] == "card_discarded"

    def test_rule_failure_is_not_an_error_response(self, service):
        """A broken rule is an unsuccessful ActionResponse."""
        game = service.create_game(CreateGameRequest(player_ids=["alice", "bob"], seed=1))
        request = pass_request(game)
        request.card_id = "missing-card"

        response = service.submit_action(game.game_id, request)

        assert not isinstance(response, ErrorResponse)
        assert not response.success
        assert response.error_code == "INVALID_ACTION"

    def test_validate_leaves_game_alone(self, service):
        """Validation reports without applying."""
        game = service.create_game(CreateGameRequest(player_ids=["alice", "bob"], seed=1))
        request = pass_request(game)

        response = service.validate_action(game.game_id, request)

        assert response.valid
        assert service.get_game(game.game_id).current_player_id == request.player_id

    def test_available_actions(self, service):
        """The current player may take every kind of action at the start."""
        game = service.create_game(CreateGameRequest(player_ids=["alice", "bob"], seed=1))

        response = service.get_available_actions(game.game_id)

        assert response.player_id == game.current_player_id
        assert set(response.actions) == {a.value for a in ActionType}

    def test_list_and_delete(self, service):
        """Created games are listed until deleted."""
        game = service.create_game(CreateGameRequest(player_ids=["alice", "bob"]))

        assert service.list_games() == [game.game_id]
        assert service.delete_game(game.game_id)
        assert service.list_games() == []


class TestHTTP:
    """Tests for the FastAPI routes."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app(settings=Settings()))

    @pytest.fixture
    def created(self, client):
        response = client.post("/api/v1/games", json={"player_ids": ["alice", "bob"], "seed": 42})
        assert response.status_code == 201
        return response.json()

    def _pass(self, game, player_id=None):
        player = next(p for p in game["players"] if p["is_current_turn"])
        return {
            "action_type": "pass",
            "player_id": player_id or player["player_id"],
            "card_id": player["hand"][0]["card_id"],
        }

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_docs_hidden_in_production(self):
        """Production settings turn off the interactive docs."""
        client = TestClient(create_app(settings=Settings(env="production")))

        assert client.get("/api/docs").status_code == 404
        assert client.get("/").json()["docs"] is None
        assert client.get("/api/v1/health").status_code == 200

    def test_docs_served_in_development(self, client):
        assert client.get("/api/docs").status_code == 200

    def test_create_validation(self, client):
        """One player is rejected before the service sees it."""
        response = client.post("/api/v1/games", json={"player_ids": ["alice"]})
        assert response.status_code == 422

    def test_get_game(self, client, created):
        response = client.get(f"/api/v1/games/{created['game_id']}")
        assert response.status_code == 200
        assert response.json()["game_id"] == created["game_id"]

    def test_missing_game_is_404(self, client):
        response = client.get("/api/v1/games/nope")
        assert response.status_code == 404
        assert response.json()["error_code"] == "GAME_NOT_FOUND"

    def test_submit_action(self, client, created):
        response = client.post(f"/api/v1/games/{created['game_id']}/actions", json=self._pass(created))

        assert response.status_code == 200
        body = response.json()
        assert body["success"]
        assert body["game"]["current_player_id"] != created["current_player_id"]

    def test_unknown_action_is_400(self, client, created):
        body = dict(self._pass(created), action_type="teleport")
        response = client.post(f"/api/v1/games/{created['game_id']}/actions", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_ACTION"

    def test_wrong_player_is_409(self, client, created):
        """Acting out of turn is a conflict."""
        other = next(p for p in created["players"] if not p["is_current_turn"])
        body = {"action_type": "pass", "player_id": other["player_id"], "card_id": other["hand"][0]["card_id"]}

        response = client.post(f"/api/v1/games/{created['game_id']}/actions", json=body)

        assert response.status_code == 409
        payload = response.json()
        assert payload["error_code"] == "NOT_YOUR_TURN"
        assert payload["details"]["errors"]

    def test_broken_rule_is_400(self, client, created):
        body = dict(self._pass(created), card_id="missing-card")
        response = client.post(f"/api/v1/games/{created['game_id']}/actions", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ACTION"

    def test_validate(self, client, created):
        response = client.post(f"/api/v1/games/{created['game_id']}/validate", json=self._pass(created))
        assert response.status_code == 200
        assert response.json()["valid"]

    def test_income(self, client, created):
        response = client.post(f"/api/v1/games/{created['game_id']}/income")

        assert response.status_code == 200
        assert all(p["money"] == 27 for p in response.json()["game"]["players"])

    def test_standings(self, client, created):
        response = client.get(f"/api/v1/games/{created['game_id']}/standings")

        assert response.status_code == 200
        body = response.json()
        assert not body["finished"]
        assert [s["placement"] for s in body["standings"]] == [1, 2]

    def test_list_and_delete(self, client, created):
        game_id = created["game_id"]
        assert client.get("/api/v1/games").json() == {"games": [game_id], "count": 1}

        response = client.delete(f"/api/v1/games/{game_id}")
        assert response.json() == {"success": True, "game_id": game_id}
        assert client.get(f"/api/v1/games/{game_id}").status_code == 404
