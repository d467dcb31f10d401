"""
Unit tests for domain exceptions.
"""

from guildstay.modules.shared.exceptions import (
    AwardPersistenceError,
    ConfigurationError,
    ErrorSeverity,
    GuildStayDomainException,
    ValidationError,
)


class TestDomainException:
    """Test the base exception contract."""

    def test_defaults(self):
        exc = GuildStayDomainException("Something broke")

        assert exc.message == "Something broke"
        assert exc.details == {}
        assert exc.severity is ErrorSeverity.ERROR
        assert exc.is_retryable is False
        assert exc.error_code == "GuildStayDomainException"
        assert str(exc) == "[GuildStayDomainException] Something broke"

    def test_to_dict(self):
        exc = GuildStayDomainException(
            "Award failed", {"stay_id": 42}, error_code="AWARD_FAILED"
        )

        data = exc.to_dict()

        assert data["error_type"] == "GuildStayDomainException"
        assert data["error_code"] == "AWARD_FAILED"
        assert data["details"] == {"stay_id": 42}
        assert data["severity"] == "error"

    def test_str_includes_code_and_details(self):
        exc = GuildStayDomainException("Award failed", {"stay_id": 42}, error_code="X")
        assert str(exc) == "[X] Award failed | Details: {'stay_id': 42}"


class TestSubclasses:
    """Test concrete exception types."""

    def test_validation_error(self):
        exc = ValidationError("award_points", "award_points must be positive")

        assert exc.field == "award_points"
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.severity is ErrorSeverity.INFO
        assert exc.is_retryable is False

    def test_configuration_error_is_critical(self):
        exc = ConfigurationError("DATABASE_URL", "missing")

        assert exc.severity is ErrorSeverity.CRITICAL
        assert exc.details == {"config_key": "DATABASE_URL"}

    def test_award_persistence_error_carries_cause(self):
        cause = RuntimeError("disk full")

        exc = AwardPersistenceError(stay_id=3, guild_id=9, cause=cause)

        assert exc.is_retryable is True
        assert exc.severity is ErrorSeverity.ERROR
        assert exc.cause is cause
        assert exc.details == {
            "stay_id": 3,
            "guild_id": 9,
            "cause_type": "RuntimeError",
            "cause": "disk full",
        }

    def test_award_persistence_error_without_cause(self):
        exc = AwardPersistenceError(stay_id=3, guild_id=None)

        assert exc.details == {"stay_id": 3, "guild_id": None}
        assert exc.error_code == "AWARD_PERSISTENCE_FAILURE"
