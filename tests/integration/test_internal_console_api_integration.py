from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.main import app


def _client() -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, client=("127.0.0.1", 8080)),
        base_url="http://test",
        headers={"X-Internal-Token": get_settings().internal_api_token},
    )


@pytest.mark.asyncio
async def test_console_flow_over_http() -> None:
    async with _client() as client:
        campaign = await client.post(
            "/internal/campaigns",
            json={"name": "Autumn Cup", "start_date": "2020-01-01", "end_date": "2099-12-31"},
        )
        assert campaign.status_code == 201
        campaign_id = campaign.json()["id"]
        assert campaign.json()["timezone"] == "America/Sao_Paulo"

        player = await client.post("/internal/players", json={"name": "Wes"})
        assert player.status_code == 201
        player_id = player.json()["id"]

        question = await client.post(
            f"/internal/campaigns/{campaign_id}/questions",
            json={"text": "2 + 2?", "choices": ["3", "4"], "answer": 1},
        )
        assert question.status_code == 201
        question_id = question.json()["id"]
        assert question.json()["day_index"] == 0

        visible = await client.get(
            f"/internal/campaigns/{campaign_id}/players/{player_id}/visible-questions"
        )
        assert visible.status_code == 200
        assert [item["question_id"] for item in visible.json()["questions"]] == [question_id]

        body = {
            "player_id": player_id,
            "question_id": question_id,
            "campaign_id": campaign_id,
            "selected_answer": 1,
        }
        first = await client.post("/internal/answers", json=body)
        second = await client.post("/internal/answers", json=body)

        assert first.status_code == 200
        assert first.json()["is_correct"] is True
        assert second.status_code == 409
        assert second.json() == {
            "detail": {"code": "E_ALREADY_ANSWERED", "message": "you already answered this question"}
        }

        product = await client.post(
            f"/internal/campaigns/{campaign_id}/products",
            json={"name": "Hoodie", "price_in_game_coins": 100_000, "quantity": 1},
        )
        assert product.status_code == 200
        purchase = await client.post(
            "/internal/store/purchases",
            json={"player_id": player_id, "product_id": product.json()["product_id"], "campaign_id": campaign_id},
        )
        assert purchase.status_code == 409
        assert purchase.json()["detail"]["code"] == "E_INSUFFICIENT_COINS"

        reconcile = await client.get(f"/internal/players/{player_id}/ledger/reconcile")
        assert reconcile.status_code == 200
        assert reconcile.json()["is_consistent"] is True

        ledger = await client.get(f"/internal/players/{player_id}/ledger")
        assert [entry["entry_type"] for entry in ledger.json()["entries"]] == ["ANSWER_REWARD"]


@pytest.mark.asyncio
async def test_unknown_campaign_is_404_over_http() -> None:
    async with _client() as client:
        response = await client.get("/internal/campaigns/999/players/1/visible-questions")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "E_CAMPAIGN_NOT_FOUND"


@pytest.mark.asyncio
async def test_console_lists_and_edits_over_http() -> None:
    async with _client() as client:
        campaign = await client.post(
            "/internal/campaigns",
            json={"name": "Winter Cup", "start_date": "2026-06-01", "end_date": "2026-06-30"},
        )
        campaign_id = campaign.json()["id"]

        bad_dates = await client.put(
            f"/internal/campaigns/{campaign_id}",
            json={"name": "Winter Cup", "start_date": "2026-07-01", "end_date": "2026-06-30"},
        )
        assert bad_dates.status_code == 422
        assert bad_dates.json()["detail"]["code"] == "E_VALIDATION"

        renamed = await client.put(
            f"/internal/campaigns/{campaign_id}",
            json={"name": "Winter Cup 2026", "start_date": "2026-06-01", "end_date": "2026-07-15"},
        )
        assert renamed.status_code == 200
        assert renamed.json()["end_date"] == "2026-07-15"

        listed = await client.get("/internal/campaigns")
        assert [item["name"] for item in listed.json()["campaigns"]] == ["Winter Cup 2026"]

        question = await client.post(
            f"/internal/campaigns/{campaign_id}/questions",
            json={"text": "Capital of Peru?", "choices": ["Lima", "Cusco"], "answer": 0},
        )
        question_id = question.json()["id"]
        edited = await client.put(
            f"/internal/questions/{question_id}",
            json={
                "text": "Capital of Peru?",
                "choices": ["Cusco", "Lima", "Arequipa"],
                "answer": 1,
                "points_on_time": 700,
                "points_late": 350,
            },
        )
        assert edited.status_code == 200
        assert edited.json()["day_index"] == 0
        assert edited.json()["answer"] == 1

        questions = await client.get(f"/internal/campaigns/{campaign_id}/questions")
        assert [item["choices"] for item in questions.json()["questions"]] == [
            ["Cusco", "Lima", "Arequipa"]
        ]
        missing = await client.get("/internal/campaigns/999999/questions")
        assert missing.status_code == 404

        team = await client.post("/internal/teams", json={"name": "Falcons"})
        team_id = team.json()["id"]
        duplicate = await client.post("/internal/teams", json={"name": "Falcons"})
        assert duplicate.status_code == 409
        assert duplicate.json()["detail"]["code"] == "E_TEAM_NAME_TAKEN"

        player = await client.post("/internal/players", json={"name": "Yara"})
        player_id = player.json()["id"]
        updated = await client.put(
            f"/internal/players/{player_id}",
            json={"name": "Yara S.", "role": "Analyst", "team_id": team_id, "score": 9999, "game_coins": 9999},
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Yara S."
        assert updated.json()["team_id"] == team_id
        assert (updated.json()["score"], updated.json()["game_coins"]) == (0, 0)

        players = await client.get("/internal/players", params={"team_id": team_id})
        assert [item["id"] for item in players.json()["players"]] == [player_id]

        teams = await client.get("/internal/teams")
        assert teams.json()["teams"] == [{"id": team_id, "name": "Falcons", "member_ids": [player_id]}]

        team_renamed = await client.put(f"/internal/teams/{team_id}", json={"name": "Hawks"})
        assert team_renamed.json()["name"] == "Hawks"

        team_deleted = await client.delete(f"/internal/teams/{team_id}")
        assert team_deleted.status_code == 204
        after = await client.get(f"/internal/players/{player_id}")
        assert after.json()["team_id"] is None

        product = await client.post(
            f"/internal/campaigns/{campaign_id}/products",
            json={"name": "Cap", "price_in_game_coins": 10, "quantity": 2},
        )
        product_id = product.json()["product_id"]
        product_deleted = await client.delete(f"/internal/products/{product_id}")
        assert product_deleted.status_code == 204
        products = await client.get(f"/internal/campaigns/{campaign_id}/products")
        assert products.json()["products"] == []
        again = await client.delete(f"/internal/products/{product_id}")
        assert again.status_code == 404
