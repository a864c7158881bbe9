"""Unit tests for the Appwrite document API client"""

import json
import re

import aiohttp
import pytest
from aioresponses import aioresponses

from dynastybracket.api.appwrite_api import (
    AppwriteAPI,
    equal,
    limit,
    offset,
    pairing_document_id,
)
from dynastybracket.engine.orchestrator import TournamentOrchestrator
from dynastybracket.exceptions import (
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
)
from dynastybracket.models.appwrite_api import AppwriteSettings
from dynastybracket.models.competitor import ApprovalStatus
from dynastybracket.models.match import Match, MatchStatus

BASE = "https://appwrite.test/v1/databases/db-1/collections"
PLAYERS = re.compile(rf"^{re.escape(BASE)}/players/documents(\?.*)?$")
MATCHES = re.compile(rf"^{re.escape(BASE)}/matches/documents(\?.*)?$")
MATCH_1 = re.compile(rf"^{re.escape(BASE)}/matches/documents/match-1(\?.*)?$")
COUNTRY = re.compile(rf"^{re.escape(BASE)}/countries/documents/japan(\?.*)?$")

PLAYER_DOC = {
    "$id": "jp-1",
    "name": "Haruki Sato",
    "rating": 2410,
    "countryId": "japan",
    "status": "approved",
    "$createdAt": "2025-01-05T10:00:00.000+00:00",
}

MATCH_DOC = {
    "$id": "match-1",
    "player1Id": "jp-1",
    "player2Id": "jp-5",
    "tournamentId": "japan",
    "round": 1,
    "status": "pending_schedule",
    "isScheduled": False,
    "isReviewed": False,
    "predictedWinnerId": "jp-1",
    "winProbability": 97,
}


def create_api(**kwargs) -> AppwriteAPI:
    settings = AppwriteSettings(
        endpoint="https://appwrite.test/v1/",
        project_id="proj-1",
        api_key="secret-key",
        database_id="db-1",
        page_limit=kwargs.pop("page_limit", 100),
    )
    return AppwriteAPI(settings, retry_delay=0, **kwargs)


def sent_requests(m: aioresponses) -> list:
    """All recorded calls, in no particular order across URLs"""
    return [call for calls in m.requests.values() for call in calls]


@pytest.mark.unit
class TestQueries:
    """Test the JSON query helpers"""

    def test_equal(self):
        assert json.loads(equal("countryId", "japan")) == {
            "method": "equal",
            "attribute": "countryId",
            "values": ["japan"],
        }

    def test_limit_and_offset(self):
        assert json.loads(limit(25)) == {"method": "limit", "values": [25]}
        assert json.loads(offset(50)) == {"method": "offset", "values": [50]}


@pytest.mark.unit
class TestAppwriteAPI:
    """Test AppwriteAPI requests and response parsing"""

    def test_base_url_strips_trailing_slash(self):
        assert create_api().base_url == BASE

    @pytest.mark.asyncio
    async def test_list_competitors(self):
        """Test that players are filtered by country and status"""
        api = create_api()

        with aioresponses() as m:
            m.get(PLAYERS, payload={"total": 1, "documents": [PLAYER_DOC]})

            competitors = await api.list_competitors("japan", ApprovalStatus.APPROVED)

            assert len(competitors) == 1
            assert competitors[0].id == "jp-1"
            assert competitors[0].group_id == "japan"
            assert competitors[0].status == ApprovalStatus.APPROVED

            (call,) = sent_requests(m)
            queries = [json.loads(value) for key, value in call.kwargs["params"]]
            assert {"method": "equal", "attribute": "countryId", "values": ["japan"]} in queries
            assert {"method": "equal", "attribute": "status", "values": ["approved"]} in queries
            assert call.kwargs["headers"]["X-Appwrite-Project"] == "proj-1"
            assert call.kwargs["headers"]["X-Appwrite-Key"] == "secret-key"

    @pytest.mark.asyncio
    async def test_list_pages_through_results(self):
        """Test that listing follows offsets until every document is read"""
        api = create_api(page_limit=2)
        docs = [dict(PLAYER_DOC, **{"$id": f"jp-{i}"}) for i in range(1, 4)]

        with aioresponses() as m:
            m.get(PLAYERS, payload={"total": 3, "documents": docs[:2]})
            m.get(PLAYERS, payload={"total": 3, "documents": docs[2:]})

            competitors = await api.list_competitors("japan")

            assert [c.id for c in competitors] == ["jp-1", "jp-2", "jp-3"]
            assert len(sent_requests(m)) == 2

    @pytest.mark.asyncio
    async def test_list_matches(self):
        api = create_api()

        with aioresponses() as m:
            m.get(MATCHES, payload={"total": 1, "documents": [MATCH_DOC]})

            matches = await api.list_matches("japan")

            assert matches[0].side_a == "jp-1"
            assert matches[0].status == MatchStatus.PENDING_SCHEDULE
            assert matches[0].win_probability == 97

    @pytest.mark.asyncio
    async def test_create_match_payload(self):
        """Test that new matches are sent with document attribute names"""
        api = create_api()
        draft = Match(**{k: v for k, v in MATCH_DOC.items() if k != "$id"})

        with aioresponses() as m:
            m.post(MATCHES, payload=MATCH_DOC, status=201)

            saved = await api.create_match(draft)

            assert saved.id == "match-1"
            (call,) = sent_requests(m)
            body = call.kwargs["json"]
            assert body["documentId"] == pairing_document_id(draft)
            assert body["data"]["player1Id"] == "jp-1"
            assert body["data"]["tournamentId"] == "japan"
            assert body["data"]["status"] == "pending_schedule"
            assert "$id" not in body["data"]
            assert "scheduledDate" not in body["data"]

    @pytest.mark.asyncio
    async def test_update_match_payload(self):
        """Test that partial updates are translated to document attributes"""
        api = create_api()
        updated = dict(MATCH_DOC, status="scheduled", isReviewed=True)

        with aioresponses() as m:
            m.patch(MATCH_1, payload=updated)

            saved = await api.update_match(
                "match-1", {"status": MatchStatus.SCHEDULED, "is_reviewed": True}
            )

            assert saved.is_reviewed is True
            (call,) = sent_requests(m)
            assert call.kwargs["json"] == {"data": {"status": "scheduled", "isReviewed": True}}

    @pytest.mark.asyncio
    async def test_get_group(self):
        api = create_api()

        with aioresponses() as m:
            m.get(COUNTRY, payload={"$id": "japan", "name": "Japan", "flag": "🇯🇵"})

            group = await api.get_group("japan")

            assert group.name == "Japan"


@pytest.mark.unit
class TestAppwriteErrors:
    """Test mapping of HTTP failures onto persistence errors"""

    @pytest.mark.asyncio
    async def test_not_found(self):
        api = create_api()

        with aioresponses() as m:
            m.get(
                MATCH_1,
                status=404,
                payload={"message": "Document not found", "code": 404, "type": "document_not_found"},
            )

            with pytest.raises(RecordNotFoundError) as exc_info:
                await api.get_match("match-1")

            assert exc_info.value.status == 404
            assert exc_info.value.record_id == "match-1"
            assert exc_info.value.operation == "get_match"

    @pytest.mark.asyncio
    async def test_conflict_is_duplicate(self):
        api = create_api()
        draft = Match(**{k: v for k, v in MATCH_DOC.items() if k != "$id"})

        with aioresponses() as m:
            m.post(MATCHES, status=409, payload={"message": "Document already exists", "code": 409})

            with pytest.raises(DuplicateRecordError):
                await api.create_match(draft)

    @pytest.mark.asyncio
    async def test_server_error_is_retried_for_reads(self):
        """Test that a read succeeds after transient 5xx responses"""
        api = create_api()

        with aioresponses() as m:
            m.get(MATCHES, status=503, payload={"message": "Service unavailable"})
            m.get(MATCHES, status=500, payload={"message": "Internal error"})
            m.get(MATCHES, payload={"total": 1, "documents": [MATCH_DOC]})

            matches = await api.list_matches("japan")

            assert len(matches) == 1
            assert len(sent_requests(m)) == 3

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self):
        """Test that reads give up after the configured retries"""
        api = create_api(retries=3)

        with aioresponses() as m:
            m.get(MATCHES, status=500, payload={"message": "Internal error"}, repeat=True)

            with pytest.raises(PersistenceError) as exc_info:
                await api.list_matches("japan")

            assert exc_info.value.status == 500
            assert len(sent_requests(m)) == 4

    @pytest.mark.asyncio
    async def test_writes_are_not_retried(self):
        """Test that a failed create is reported on the first error"""
        api = create_api()
        draft = Match(**{k: v for k, v in MATCH_DOC.items() if k != "$id"})

        with aioresponses() as m:
            m.post(MATCHES, status=500, payload={"message": "Internal error"}, repeat=True)

            with pytest.raises(PersistenceError):
                await api.create_match(draft)

            assert len(sent_requests(m)) == 1

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test that network failures become PersistenceError"""
        api = create_api(retries=1)

        with aioresponses() as m:
            m.get(MATCH_1, exception=aiohttp.ClientConnectionError("refused"), repeat=True)

            with pytest.raises(PersistenceError) as exc_info:
                await api.get_match("match-1")

            assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_invalid_document(self):
        """Test that malformed documents are reported as store errors"""
        api = create_api()

        with aioresponses() as m:
            m.get(MATCH_1, payload={"$id": "match-1", "player1Id": "jp-1"})

            with pytest.raises(PersistenceError, match="invalid document"):
                await api.get_match("match-1")


@pytest.mark.unit
class TestPairingDocumentId:
    """Test the deterministic match document id"""

    def create_draft(self, **kwargs) -> Match:
        fields = {k: v for k, v in MATCH_DOC.items() if k != "$id"}
        fields.update(kwargs)
        return Match(**fields)

    def test_same_pairing_same_id(self):
        """Test that two generators produce the same id for one pairing"""
        first = self.create_draft()
        second = self.create_draft(status="scheduled", winProbability=60)

        assert pairing_document_id(first) == pairing_document_id(second)

    def test_different_pairings_differ(self):
        base = pairing_document_id(self.create_draft())

        assert pairing_document_id(self.create_draft(player2Id="jp-4")) != base
        assert pairing_document_id(self.create_draft(tournamentId="brazil")) != base
        assert pairing_document_id(self.create_draft(round=2)) != base

    def test_valid_appwrite_id(self):
        """Test the 36 character limit and allowed characters"""
        document_id = pairing_document_id(self.create_draft())

        assert len(document_id) <= 36
        assert re.fullmatch(r"[a-zA-Z0-9][a-zA-Z0-9._-]*", document_id)


@pytest.mark.integration
class TestConcurrentGeneration:
    """Test bracket generation when another process already created the matches"""

    @pytest.mark.asyncio
    async def test_conflict_on_create_reloads_existing_bracket(self):
        """Test that 409 responses while seeding turn into a reload"""
        api = create_api()
        players = [
            dict(PLAYER_DOC, **{"$id": f"jp-{i}", "name": f"Player {i}", "rating": 2500 - i * 100})
            for i in range(1, 5)
        ]
        stored = [
            dict(MATCH_DOC, **{"$id": "other-1", "player1Id": "jp-1", "player2Id": "jp-4"}),
            dict(
                MATCH_DOC,
                **{"$id": "other-2", "player1Id": "jp-2", "player2Id": "jp-3", "predictedWinnerId": "jp-2"},
            ),
        ]

        with aioresponses() as m:
            # Empty on the first look, filled by the other process on reload
            m.get(MATCHES, payload={"total": 0, "documents": []})
            m.get(MATCHES, payload={"total": 2, "documents": stored})
            m.get(PLAYERS, payload={"total": 4, "documents": players}, repeat=True)
            m.post(
                MATCHES,
                status=409,
                payload={"message": "Document with the requested ID already exists.", "code": 409},
                repeat=True,
            )

            view = await TournamentOrchestrator(api).get_or_create_bracket("japan")

            assert view.generated is False
            assert sorted(view.match_ids) == ["other-1", "other-2"]
            assert view.failed_pairings == []
            assert all(entry.is_complete for entry in view.matches)
            posts = [
                call for (method, _), calls in m.requests.items() if method == "POST" for call in calls
            ]
            assert len(posts) == 2
            assert {call.kwargs["json"]["documentId"] for call in posts} == {
                pairing_document_id(Match(**{k: v for k, v in doc.items() if k != "$id"}))
                for doc in stored
            }
