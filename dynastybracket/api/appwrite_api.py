"""Appwrite document API client for dynasties, players and matches."""

import asyncio
import hashlib
import json
from typing import Any

import aiohttp
from pydantic import ValidationError

from ..exceptions import DuplicateRecordError, PersistenceError, RecordNotFoundError
from ..models.appwrite_api import AppwriteDocumentList, AppwriteError, AppwriteSettings
from ..models.competitor import ApprovalStatus, Competitor, Group
from ..models.match import Match
from ..utils.logging import log


def equal(attribute: str, value: str) -> str:
    """Appwrite ``equal`` query"""
    return json.dumps({"method": "equal", "attribute": attribute, "values": [value]})


def limit(count: int) -> str:
    return json.dumps({"method": "limit", "values": [count]})


def offset(count: int) -> str:
    return json.dumps({"method": "offset", "values": [count]})


def pairing_document_id(match: Match) -> str:
    """Document id derived from the pairing key.

    Appwrite ids are at most 36 characters of [a-zA-Z0-9._-] and must not
    start with a special character, so the key is hashed. Creating the same
    pairing twice then fails with HTTP 409 instead of adding a second match.
    """
    key = "|".join(str(part) for part in match.pairing_key)
    return "m" + hashlib.sha256(key.encode("utf-8")).hexdigest()[:35]


class AppwriteAPI:
    """Handle document calls to an Appwrite database"""

    def __init__(
        self,
        settings: AppwriteSettings,
        retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 10.0,
    ):
        self.settings: AppwriteSettings = settings
        self.base_url: str = (
            f"{settings.endpoint.rstrip('/')}/databases/{settings.database_id}/collections"
        )
        # Reads retry 5xx responses with exponential backoff: 1s, 2s, 4s
        self.retries: int = retries
        self.retry_delay: float = retry_delay
        self.timeout: float = timeout

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Appwrite-Project": self.settings.project_id,
        }
        if self.settings.api_key:
            headers["X-Appwrite-Key"] = self.settings.api_key
        return headers

    def _url(self, collection: str, document_id: str | None = None) -> str:
        url = f"{self.base_url}/{collection}/documents"
        if document_id:
            url += f"/{document_id}"
        return url

    async def _request(
        self,
        method: str,
        operation: str,
        collection: str,
        document_id: str | None = None,
        queries: list[str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and map failures onto the persistence errors"""
        url = self._url(collection, document_id)
        params = [("queries[]", q) for q in queries or []]
        attempts = self.retries + 1 if method == "GET" else 1

        for attempt in range(attempts):
            try:
                async with aiohttp.ClientSession() as session:
                    async with session.request(
                        method,
                        url,
                        params=params,
                        json=payload,
                        headers=self._headers(),
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        log(f"📡 {operation} {method} {collection}: {response.status}")
                        text = await response.text()

                        if response.status < 300:
                            return json.loads(text) if text else {}

                        error = self._parse_error(text, response.status)
                        if response.status >= 500 and attempt < attempts - 1:
                            delay = self.retry_delay * (2**attempt)
                            log(
                                f"🔄 Retrying {operation} in {delay}s "
                                f"(attempt {attempt + 1}): {error.message}"
                            )
                            await asyncio.sleep(delay)
                            continue
                        raise self._map_error(operation, error, response.status, document_id)

            except PersistenceError:
                raise
            except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
                if attempt < attempts - 1:
                    delay = self.retry_delay * (2**attempt)
                    log(f"🔄 Retrying {operation} in {delay}s after {type(e).__name__}: {e}")
                    await asyncio.sleep(delay)
                    continue
                log(f"❌ {operation} failed: {type(e).__name__}: {e}")
                raise PersistenceError(
                    operation, f"{type(e).__name__}: {e}", record_id=document_id
                ) from e

        raise PersistenceError(operation, "retries exhausted", record_id=document_id)

    @staticmethod
    def _parse_error(text: str, status: int) -> AppwriteError:
        try:
            return AppwriteError(**json.loads(text))
        except (json.JSONDecodeError, TypeError, ValidationError):
            return AppwriteError(message=text or f"HTTP {status}", code=status)

    @staticmethod
    def _map_error(
        operation: str, error: AppwriteError, status: int, document_id: str | None
    ) -> PersistenceError:
        log(f"❌ {operation} HTTP {status}: {error.message}")
        if status == 404:
            error_class: type[PersistenceError] = RecordNotFoundError
        elif status == 409:
            error_class = DuplicateRecordError
        else:
            error_class = PersistenceError
        return error_class(operation, error.message, record_id=document_id, status=status)

    async def _list_documents(
        self, operation: str, collection: str, filters: list[str]
    ) -> list[dict[str, Any]]:
        """Page through a collection until every matching document is fetched"""
        documents: list[dict[str, Any]] = []
        page_size = self.settings.page_limit
        while True:
            raw = await self._request(
                "GET",
                operation,
                collection,
                queries=filters + [limit(page_size), offset(len(documents))],
            )
            page = AppwriteDocumentList(**raw)
            documents.extend(page.documents)
            if len(page.documents) < page_size or len(documents) >= page.total:
                return documents

    def _parse(self, model: type, operation: str, document: dict[str, Any]) -> Any:
        try:
            return model(**document)
        except ValidationError as e:
            log(f"❌ Invalid document from {operation}: {e}")
            raise PersistenceError(
                operation, f"invalid document: {e}", record_id=document.get("$id")
            ) from e

    async def list_competitors(
        self, group_id: str, status: ApprovalStatus | None = None
    ) -> list[Competitor]:
        filters = [equal("countryId", group_id)]
        if status is not None:
            filters.append(equal("status", status.value))
        documents = await self._list_documents(
            "list_competitors", self.settings.players_collection, filters
        )
        return [self._parse(Competitor, "list_competitors", doc) for doc in documents]

    async def list_matches(self, group_id: str) -> list[Match]:
        documents = await self._list_documents(
            "list_matches",
            self.settings.matches_collection,
            [equal("tournamentId", group_id)],
        )
        return [self._parse(Match, "list_matches", doc) for doc in documents]

    async def create_match(self, match: Match) -> Match:
        document = await self._request(
            "POST",
            "create_match",
            self.settings.matches_collection,
            payload={"documentId": pairing_document_id(match), "data": match.to_document()},
        )
        return self._parse(Match, "create_match", document)

    async def update_match(self, match_id: str, changes: dict[str, Any]) -> Match:
        document = await self._request(
            "PATCH",
            "update_match",
            self.settings.matches_collection,
            document_id=match_id,
            payload={"data": Match.document_fields(changes)},
        )
        return self._parse(Match, "update_match", document)

    async def get_match(self, match_id: str) -> Match:
        document = await self._request(
            "GET", "get_match", self.settings.matches_collection, document_id=match_id
        )
        return self._parse(Match, "get_match", document)

    async def get_competitor(self, competitor_id: str) -> Competitor:
        document = await self._request(
            "GET",
            "get_competitor",
            self.settings.players_collection,
            document_id=competitor_id,
        )
        return self._parse(Competitor, "get_competitor", document)

    async def update_competitor(
        self, competitor_id: str, changes: dict[str, Any]
    ) -> Competitor:
        document = await self._request(
            "PATCH",
            "update_competitor",
            self.settings.players_collection,
            document_id=competitor_id,
            payload={"data": Competitor.document_fields(changes)},
        )
        return self._parse(Competitor, "update_competitor", document)

    async def get_group(self, group_id: str) -> Group:
        document = await self._request(
            "GET", "get_group", self.settings.countries_collection, document_id=group_id
        )
        return self._parse(Group, "get_group", document)
