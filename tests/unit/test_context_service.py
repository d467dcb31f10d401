"""
Unit tests for GuildContextService.

Repositories are mocked; these tests cover the selection rules only.
"""

import pytest

from guildstay.modules.guild.context_service import (
    GuildContext,
    GuildContextService,
    GuildMode,
)
from guildstay.modules.guild.repository import GuildMemberRow
from guildstay.modules.shared.exceptions import ValidationError


class FakeLocation:
    def __init__(self, user_id, lat, lng):
        self.user_id = user_id
        self.lat = lat
        self.lng = lng

    @property
    def has_position(self):
        return self.lat is not None and self.lng is not None


@pytest.fixture
def service(mocker, mock_database_service):
    svc = GuildContextService(database_service=mock_database_service, nearby_radius_m=3000.0)
    svc._membership_repo = mocker.MagicMock()
    svc._membership_repo.find_approved_guild_ids = mocker.AsyncMock(return_value=[1, 2])
    svc._membership_repo.find_approved_members = mocker.AsyncMock(return_value=[])
    svc._location_repo = mocker.MagicMock()
    svc._location_repo.find_by_user_ids = mocker.AsyncMock(return_value=[])
    svc._location_repo.find_by_user_id = mocker.AsyncMock(return_value=None)
    return svc


@pytest.mark.asyncio
class TestSelection:
    """Test guild selection from mocked stores."""

    async def test_no_membership_is_personal(self, service):
        service._membership_repo.find_approved_guild_ids.return_value = []

        context = await service.resolve(10, 0.0, 0.0)

        assert context == GuildContext.personal(10)
        service._membership_repo.find_approved_members.assert_not_awaited()

    async def test_tie_goes_to_lowest_guild_id(self, service):
        service._membership_repo.find_approved_members.return_value = [
            GuildMemberRow(user_id=21, guild_id=2, guild_name="Beta"),
            GuildMemberRow(user_id=11, guild_id=1, guild_name="Alpha"),
        ]
        service._location_repo.find_by_user_ids.return_value = [
            FakeLocation(21, 0.001, 0.0),
            FakeLocation(11, 0.001, 0.0),
        ]

        context = await service.resolve(10, 0.0, 0.0)

        assert context.mode is GuildMode.GUILD
        assert context.guild_id == 1
        assert context.guild_name == "Alpha"
        assert context.nearby_member_count == 1

    async def test_members_without_position_are_skipped(self, service):
        service._membership_repo.find_approved_members.return_value = [
            GuildMemberRow(user_id=11, guild_id=1, guild_name="Alpha"),
            GuildMemberRow(user_id=12, guild_id=1, guild_name="Alpha"),
            GuildMemberRow(user_id=21, guild_id=2, guild_name="Beta"),
        ]
        service._location_repo.find_by_user_ids.return_value = [
            FakeLocation(11, None, None),
            FakeLocation(12, 0.0, None),
            FakeLocation(21, 0.0, 0.0),
        ]

        context = await service.resolve(10, 0.0, 0.0)

        assert context.guild_id == 2
        assert context.base_user_ids == (10, 21)

    async def test_boundary_distance_is_inclusive(self, service, mocker):
        service._membership_repo.find_approved_members.return_value = [
            GuildMemberRow(user_id=11, guild_id=1, guild_name="Alpha"),
        ]
        service._location_repo.find_by_user_ids.return_value = [FakeLocation(11, 1.0, 1.0)]
        mocker.patch(
            "guildstay.modules.guild.context_service.distance_meters",
            return_value=3000.0,
        )

        context = await service.resolve(10, 0.0, 0.0)

        assert context.mode is GuildMode.GUILD

    async def test_just_beyond_boundary_is_personal(self, service, mocker):
        service._membership_repo.find_approved_members.return_value = [
            GuildMemberRow(user_id=11, guild_id=1, guild_name="Alpha"),
        ]
        service._location_repo.find_by_user_ids.return_value = [FakeLocation(11, 1.0, 1.0)]
        mocker.patch(
            "guildstay.modules.guild.context_service.distance_meters",
            return_value=3000.1,
        )

        context = await service.resolve(10, 0.0, 0.0)

        assert context.mode is GuildMode.PERSONAL

    async def test_live_location_without_row_is_personal(self, service):
        context = await service.resolve_from_live_location(10)

        assert context == GuildContext.personal(10)
        service._membership_repo.find_approved_guild_ids.assert_not_awaited()


class TestConstruction:
    """Test policy configuration."""

    def test_radius_from_config(self, mock_database_service):
        svc = GuildContextService(database_service=mock_database_service)
        assert svc.nearby_radius_m == 3000.0

    @pytest.mark.parametrize("radius", [0, -10.0, float("nan"), float("inf")])
    def test_non_positive_radius_rejected(self, mock_database_service, radius):
        with pytest.raises(ValidationError):
            GuildContextService(database_service=mock_database_service, nearby_radius_m=radius)


class TestGuildContext:
    """Test the result type."""

    def test_personal_shape(self):
        context = GuildContext.personal(5)

        assert context.mode is GuildMode.PERSONAL
        assert context.guild_id is None
        assert context.guild_name is None
        assert context.nearby_member_count == 0
        assert context.base_user_ids == (5,)
        assert context.is_guild is False

    def test_to_dict(self):
        context = GuildContext(
            mode=GuildMode.GUILD,
            guild_id=1,
            guild_name="Alpha",
            nearby_member_count=2,
            base_user_ids=(5, 6, 7),
        )

        assert context.to_dict() == {
            "mode": "GUILD",
            "guild_id": 1,
            "guild_name": "Alpha",
            "nearby_member_count": 2,
            "base_user_ids": [5, 6, 7],
        }
