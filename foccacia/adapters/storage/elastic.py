"""Elasticsearch storage backend."""

import logging
import uuid
from typing import Any, Dict, List
from urllib.parse import quote

from foccacia.adapters.football_api import FootballAPIClient
from foccacia.core.entities import Group, GroupDetails, GroupTeam, User
from foccacia.core.errors import (
    ConflictError,
    InternalError,
    InvalidDataError,
    NotFoundError,
)
from .base import build_group_details, ensure_team_exists
from .elastic_client import ElasticClient, ElasticResponse

logger = logging.getLogger(__name__)

USERS_INDEX = "users"
GROUPS_INDEX = "groups"
GROUP_TEAMS_INDEX = "group_teams"

INDEX_MAPPINGS: Dict[str, Dict[str, Any]] = {
    USERS_INDEX: {
        "properties": {
            "name": {"type": "keyword"},
            "userToken": {"type": "keyword"},
        }
    },
    GROUPS_INDEX: {
        "properties": {
            "name": {"type": "keyword"},
            "description": {"type": "text"},
            "ownerId": {"type": "keyword"},
        }
    },
    GROUP_TEAMS_INDEX: {
        "properties": {
            "groupId": {"type": "keyword"},
            "teamId": {"type": "integer"},
            "leagueId": {"type": "integer"},
            "season": {"type": "integer"},
        }
    },
}

# writes wait for the next refresh so the following search sees them
WAIT_FOR_REFRESH = {"refresh": "wait_for"}


class ElasticStorage:
    """Storage backend persisting users, groups and memberships in Elasticsearch.

    Ids are the ``_id`` strings Elasticsearch assigns. Checks and writes are
    separate requests, so two concurrent ``add_team_to_group`` calls for the
    same tuple can both pass the duplicate check.
    """

    def __init__(
        self,
        football_api: FootballAPIClient,
        elastic: ElasticClient,
        max_results: int = 1000,
    ):
        self.football_api = football_api
        self.elastic = elastic
        self.max_results = max_results

    def parse_group_id(self, raw: Any) -> str:
        return self._parse_document_id(raw, "Group id")

    def parse_membership_id(self, raw: Any) -> str:
        return self._parse_document_id(raw, "Group team id")

    @staticmethod
    def _parse_document_id(raw: Any, label: str) -> str:
        if raw is None or not str(raw).strip():
            raise InvalidDataError(f"{label} must be provided")
        return str(raw).strip()

    async def initialize(self) -> None:
        """Create the indices, leaving existing ones untouched."""
        for index, mappings in INDEX_MAPPINGS.items():
            response = await self.elastic.request("PUT", f"/{index}", {"mappings": mappings})
            if response.error is None:
                logger.info(f"Created index {index}")
            elif response.error_type == "resource_already_exists_exception":
                logger.info(f"Index {index} already exists")
            else:
                logger.error(f"Error creating index {index}: {response.error}")
                raise InternalError(f"Error creating index {index}: {response.error}")

    async def close(self) -> None:
        await self.elastic.close()

    # Conversion methods

    @staticmethod
    def _user_from_hit(hit: Dict[str, Any]) -> User:
        source = hit["_source"]
        return User(id=hit["_id"], name=source["name"], token=source["userToken"])

    @staticmethod
    def _group_from_hit(hit: Dict[str, Any]) -> Group:
        source = hit["_source"]
        return Group(
            id=hit["_id"],
            name=source["name"],
            description=source["description"],
            owner_id=source["ownerId"],
        )

    @staticmethod
    def _group_team_from_hit(hit: Dict[str, Any]) -> GroupTeam:
        source = hit["_source"]
        return GroupTeam(
            id=hit["_id"],
            group_id=source["groupId"],
            team_id=source["teamId"],
            league_id=source["leagueId"],
            season=source["season"],
        )

    # Request helpers

    async def _search(self, index: str, query: Dict[str, Any]) -> ElasticResponse:
        response = await self.elastic.request(
            "POST", f"/{index}/_search", {"query": query, "size": self.max_results}
        )
        self._raise_for_error(response, f"searching {index}")
        return response

    async def _index(self, index: str, document: Dict[str, Any]) -> str:
        response = await self.elastic.request(
            "POST", f"/{index}/_doc", document, params=WAIT_FOR_REFRESH
        )
        self._raise_for_error(response, f"indexing into {index}")
        return response.body["_id"]

    @staticmethod
    def _raise_for_error(response: ElasticResponse, action: str) -> None:
        if response.error is not None:
            logger.error(f"Elasticsearch error while {action}: {response.error}")
            raise InternalError(f"Elasticsearch error while {action}: {response.error}")

    @staticmethod
    def _doc_path(index: str, doc_id: str) -> str:
        return f"/{index}/_doc/{quote(str(doc_id), safe='')}"

    # User methods

    async def create_user(self, name: str) -> User:
        existing = await self._search(USERS_INDEX, {"term": {"name": name}})
        if existing.total_hits > 0:
            raise ConflictError(f"User with name {name} already exists")

        token = str(uuid.uuid4())
        user_id = await self._index(USERS_INDEX, {"name": name, "userToken": token})
        logger.info(f"Created user {user_id}")
        return User(id=user_id, name=name, token=token)

    async def get_user_by_name(self, name: str) -> User:
        response = await self._search(USERS_INDEX, {"term": {"name": name}})
        if response.total_hits == 0:
            raise NotFoundError(f"User with name {name} not found")
        return self._user_from_hit(response.hits[0])

    async def convert_token_to_user_id(self, token: str) -> str:
        response = await self._search(USERS_INDEX, {"term": {"userToken": token}})
        if response.total_hits == 0:
            raise NotFoundError(f"User with token {token} not found")
        return response.hits[0]["_id"]

    # Group methods

    async def get_groups_by_owner(self, user_id: str) -> List[Group]:
        response = await self._search(GROUPS_INDEX, {"term": {"ownerId": str(user_id)}})
        return [self._group_from_hit(hit) for hit in response.hits]

    async def get_group(self, group_id: str) -> Group:
        response = await self.elastic.request("GET", self._doc_path(GROUPS_INDEX, group_id))
        self._raise_for_error(response, f"reading group {group_id}")
        if not response.body.get("found"):
            raise NotFoundError(f"Group with id {group_id} not found")
        return self._group_from_hit(response.body)

    async def create_group(self, name: str, description: str, owner_id: str) -> Group:
        group_id = await self._index(
            GROUPS_INDEX,
            {"name": name, "description": description, "ownerId": str(owner_id)},
        )
        logger.info(f"Created group {group_id} for user {owner_id}")
        return Group(id=group_id, name=name, description=description, owner_id=str(owner_id))

    async def update_group(self, group_id: str, name: str, description: str) -> Group:
        response = await self.elastic.request(
            "POST",
            f"/{GROUPS_INDEX}/_update/{quote(str(group_id), safe='')}",
            {"doc": {"name": name, "description": description}},
            params=WAIT_FOR_REFRESH,
        )
        if response.error_type == "document_missing_exception":
            raise NotFoundError(f"Group with id {group_id} not found")
        self._raise_for_error(response, f"updating group {group_id}")
        return await self.get_group(group_id)

    async def delete_group(self, group_id: str) -> None:
        response = await self.elastic.request(
            "DELETE", self._doc_path(GROUPS_INDEX, group_id), params=WAIT_FOR_REFRESH
        )
        self._raise_for_error(response, f"deleting group {group_id}")
        if response.body.get("result") == "not_found":
            raise NotFoundError(f"Group with id {group_id} not found")

        cascade = await self.elastic.request(
            "POST",
            f"/{GROUP_TEAMS_INDEX}/_delete_by_query",
            {"query": {"term": {"groupId": str(group_id)}}},
            params={"refresh": "true"},
        )
        self._raise_for_error(cascade, f"deleting teams of group {group_id}")
        logger.info(f"Deleted group {group_id} and {cascade.body.get('deleted', 0)} teams")

    # Membership methods

    async def get_group_memberships(self, group_id: str) -> List[GroupTeam]:
        response = await self._search(GROUP_TEAMS_INDEX, {"term": {"groupId": str(group_id)}})
        return [self._group_team_from_hit(hit) for hit in response.hits]

    async def get_group_details(self, group_id: str) -> GroupDetails:
        group = await self.get_group(group_id)
        memberships = await self.get_group_memberships(group_id)
        return await build_group_details(self.football_api, group, memberships)

    async def add_team_to_group(
        self, group_id: str, team_id: int, league_id: int, season: int
    ) -> GroupTeam:
        await self.get_group(group_id)
        await ensure_team_exists(self.football_api, team_id, league_id, season)

        existing = await self._search(
            GROUP_TEAMS_INDEX,
            {
                "bool": {
                    "filter": [
                        {"term": {"groupId": str(group_id)}},
                        {"term": {"teamId": team_id}},
                        {"term": {"leagueId": league_id}},
                        {"term": {"season": season}},
                    ]
                }
            },
        )
        if existing.total_hits > 0:
            raise ConflictError(
                f"Team with id {team_id}, league id {league_id} and season {season} "
                f"already exists in group with id {group_id}"
            )

        document = {
            "groupId": str(group_id),
            "teamId": team_id,
            "leagueId": league_id,
            "season": season,
        }
        membership_id = await self._index(GROUP_TEAMS_INDEX, document)
        logger.info(f"Added team {team_id} to group {group_id}")
        return GroupTeam(
            id=membership_id,
            group_id=str(group_id),
            team_id=team_id,
            league_id=league_id,
            season=season,
        )

    async def remove_team_from_group(self, membership_id: str, group_id: str) -> None:
        existing = await self._search(
            GROUP_TEAMS_INDEX,
            {
                "bool": {
                    "filter": [
                        {"ids": {"values": [str(membership_id)]}},
                        {"term": {"groupId": str(group_id)}},
                    ]
                }
            },
        )
        if existing.total_hits == 0:
            raise NotFoundError(
                f"Team with id {membership_id} not found in group with id {group_id}"
            )

        response = await self.elastic.request(
            "DELETE",
            self._doc_path(GROUP_TEAMS_INDEX, existing.hits[0]["_id"]),
            params=WAIT_FOR_REFRESH,
        )
        self._raise_for_error(response, f"removing team {membership_id}")
