"""Behaviour every storage backend must share.

Each test runs once against the in-memory backend and once against the
Elasticsearch backend served by the in-process double.
"""

import pytest

from foccacia.core.entities import GroupTeamDetails
from foccacia.core.errors import ConflictError, InternalError, NotFoundError


@pytest.mark.asyncio
class TestUsers:
    async def test_create_user_issues_a_token(self, storage):
        user = await storage.create_user("alice")

        assert user.name == "alice"
        assert user.token
        assert await storage.convert_token_to_user_id(user.token) == user.id

    async def test_tokens_are_unique(self, storage):
        alice = await storage.create_user("alice")
        bob = await storage.create_user("bob")

        assert alice.token != bob.token
        assert alice.id != bob.id

    async def test_duplicate_user_name_conflicts(self, storage):
        await storage.create_user("alice")

        with pytest.raises(ConflictError):
            await storage.create_user("alice")

    async def test_get_user_by_name(self, storage):
        created = await storage.create_user("alice")

        assert await storage.get_user_by_name("alice") == created

    async def test_unknown_user_name_is_not_found(self, storage):
        with pytest.raises(NotFoundError):
            await storage.get_user_by_name("nobody")

    async def test_unknown_token_is_not_found(self, storage):
        await storage.create_user("alice")

        with pytest.raises(NotFoundError):
            await storage.convert_token_to_user_id("not-a-token")

    async def test_token_lookup_does_not_mutate(self, storage):
        user = await storage.create_user("alice")

        first = await storage.convert_token_to_user_id(user.token)
        second = await storage.convert_token_to_user_id(user.token)

        assert first == second == user.id
        assert await storage.get_groups_by_owner(user.id) == []


@pytest.mark.asyncio
class TestGroups:
    async def test_create_and_get_group(self, storage):
        owner = await storage.create_user("alice")

        created = await storage.create_group("Favs", "My teams", owner.id)
        fetched = await storage.get_group(created.id)

        assert fetched == created
        assert fetched.name == "Favs"
        assert fetched.description == "My teams"
        assert fetched.is_owned_by(owner.id)

    async def test_group_ids_are_fresh(self, storage):
        owner = await storage.create_user("alice")

        first = await storage.create_group("A", "a", owner.id)
        second = await storage.create_group("B", "b", owner.id)

        assert first.id != second.id

    async def test_groups_by_owner(self, storage):
        alice = await storage.create_user("alice")
        bob = await storage.create_user("bob")
        mine = await storage.create_group("Mine", "a", alice.id)
        await storage.create_group("Theirs", "b", bob.id)

        groups = await storage.get_groups_by_owner(alice.id)

        assert groups == [mine]

    async def test_get_unknown_group_is_not_found(self, storage):
        missing = storage.parse_group_id("999")

        with pytest.raises(NotFoundError):
            await storage.get_group(missing)

    async def test_update_group(self, storage):
        owner = await storage.create_user("alice")
        group = await storage.create_group("Old", "old", owner.id)

        updated = await storage.update_group(group.id, "New", "new")

        assert updated.id == group.id
        assert updated.name == "New"
        assert updated.description == "new"
        assert (await storage.get_group(group.id)).name == "New"

    async def test_update_with_same_values_succeeds(self, storage):
        owner = await storage.create_user("alice")
        group = await storage.create_group("Same", "same", owner.id)

        updated = await storage.update_group(group.id, "Same", "same")

        assert updated == group

    async def test_update_unknown_group_is_not_found(self, storage):
        with pytest.raises(NotFoundError):
            await storage.update_group(storage.parse_group_id("999"), "x", "y")

    async def test_delete_group(self, storage):
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)

        await storage.delete_group(group.id)

        with pytest.raises(NotFoundError):
            await storage.get_group(group.id)
        assert await storage.get_groups_by_owner(owner.id) == []

    async def test_delete_unknown_group_is_not_found(self, storage):
        with pytest.raises(NotFoundError):
            await storage.delete_group(storage.parse_group_id("999"))

    async def test_changing_a_returned_group_leaves_the_stored_one(self, storage):
        alice = await storage.create_user("alice")
        bob = await storage.create_user("bob")
        created = await storage.create_group("Favs", "My teams", alice.id)

        created.owner_id = bob.id
        created.name = "Hijacked"
        fetched = await storage.get_group(created.id)
        fetched.description = "changed"
        (await storage.get_groups_by_owner(alice.id))[0].owner_id = bob.id

        stored = await storage.get_group(created.id)
        assert stored.owner_id == alice.id
        assert stored.name == "Favs"
        assert stored.description == "My teams"
        assert await storage.get_groups_by_owner(bob.id) == []


@pytest.mark.asyncio
class TestMemberships:
    async def test_add_team_to_group(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)

        membership = await storage.add_team_to_group(group.id, 529, 140, 2021)

        assert membership.group_id == group.id
        assert membership.matches(529, 140, 2021)
        assert await storage.get_group_memberships(group.id) == [membership]

    async def test_duplicate_membership_conflicts(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)
        await storage.add_team_to_group(group.id, 529, 140, 2021)

        with pytest.raises(ConflictError):
            await storage.add_team_to_group(group.id, 529, 140, 2021)

        assert len(await storage.get_group_memberships(group.id)) == 1

    async def test_same_team_other_season_is_allowed(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        football_mock.mock_team(529, 140, 2022)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)

        await storage.add_team_to_group(group.id, 529, 140, 2021)
        await storage.add_team_to_group(group.id, 529, 140, 2022)

        assert len(await storage.get_group_memberships(group.id)) == 2

    async def test_unknown_team_is_not_found(self, storage, football_mock):
        football_mock.mock_team_not_in_league(529, 39, 2021)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)

        with pytest.raises(NotFoundError):
            await storage.add_team_to_group(group.id, 529, 39, 2021)

        assert await storage.get_group_memberships(group.id) == []

    async def test_add_to_unknown_group_is_not_found(self, storage, football_mock):
        route = football_mock.mock_team(529, 140, 2021)

        with pytest.raises(NotFoundError):
            await storage.add_team_to_group(storage.parse_group_id("999"), 529, 140, 2021)

        assert route.call_count == 0

    async def test_remove_team_from_group(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)
        membership = await storage.add_team_to_group(group.id, 529, 140, 2021)

        await storage.remove_team_from_group(membership.id, group.id)

        assert await storage.get_group_memberships(group.id) == []

    async def test_remove_from_other_group_is_not_found(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        owner = await storage.create_user("alice")
        first = await storage.create_group("First", "1", owner.id)
        second = await storage.create_group("Second", "2", owner.id)
        membership = await storage.add_team_to_group(first.id, 529, 140, 2021)

        with pytest.raises(NotFoundError):
            await storage.remove_team_from_group(membership.id, second.id)

        assert await storage.get_group_memberships(first.id) == [membership]

    async def test_remove_unknown_membership_is_not_found(self, storage):
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)

        with pytest.raises(NotFoundError):
            await storage.remove_team_from_group(storage.parse_membership_id("999"), group.id)

    async def test_delete_group_removes_its_memberships(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        owner = await storage.create_user("alice")
        doomed = await storage.create_group("Doomed", "bye", owner.id)
        kept = await storage.create_group("Kept", "stay", owner.id)
        await storage.add_team_to_group(doomed.id, 529, 140, 2021)
        survivor = await storage.add_team_to_group(kept.id, 529, 140, 2021)

        await storage.delete_group(doomed.id)

        assert await storage.get_group_memberships(doomed.id) == []
        assert await storage.get_group_memberships(kept.id) == [survivor]


@pytest.mark.asyncio
class TestGroupDetails:
    async def test_memberships_are_enriched(self, storage, football_mock):
        football_mock.mock_barcelona_in_la_liga(2021)
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)
        membership = await storage.add_team_to_group(group.id, 529, 140, 2021)

        details = await storage.get_group_details(group.id)

        assert details.id == group.id
        assert details.name == "Favs"
        assert details.description == "My teams"
        assert details.owner_id == owner.id
        assert details.teams == [
            GroupTeamDetails(
                id=membership.id,
                team="Barcelona",
                venue="Camp Nou",
                league="La Liga",
                season=2021,
            )
        ]

    async def test_empty_group_has_no_teams(self, storage):
        owner = await storage.create_user("alice")
        group = await storage.create_group("Empty", "nothing", owner.id)

        details = await storage.get_group_details(group.id)

        assert details.teams == []

    async def test_unknown_group_is_not_found(self, storage):
        with pytest.raises(NotFoundError):
            await storage.get_group_details(storage.parse_group_id("999"))

    async def test_enrichment_failure_fails_the_whole_result(self, storage, football_mock):
        football_mock.mock_team(529, 140, 2021)
        football_mock.mock_response("/leagues", {"id": 140}, status_code=500, json={})
        owner = await storage.create_user("alice")
        group = await storage.create_group("Favs", "My teams", owner.id)
        await storage.add_team_to_group(group.id, 529, 140, 2021)

        with pytest.raises(InternalError):
            await storage.get_group_details(group.id)
