"""Which failures count as losing a race to a concurrent writer."""

import pytest
from protean.exceptions import ExpectedVersionError, ValidationError
from sqlalchemy.exc import IntegrityError
from vcreviews.shared.errors import is_write_conflict


class TestIsWriteConflict:
    def test_stale_version(self):
        assert is_write_conflict(ExpectedVersionError("Wrong expected version"))

    def test_duplicate_key_in_store(self):
        assert is_write_conflict(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))

    @pytest.mark.parametrize(
        "messages",
        [
            {"id": ["Firm with id 'a49b9f07' is already present."]},
            {"slug": ["Firm with slug 'nova-capital' is already present."]},
            {"external_id": ["Member with external_id 'user_ada' is already present."]},
        ],
    )
    def test_duplicate_identity_or_unique_field(self, messages):
        assert is_write_conflict(ValidationError(messages))

    @pytest.mark.parametrize(
        "messages",
        [
            {"review_text": ["Review text cannot be blank"]},
            {"firm_name": ["Firm name must contain at least one letter or digit"]},
        ],
    )
    def test_rule_violations_are_not_conflicts(self, messages):
        assert not is_write_conflict(ValidationError(messages))

    def test_unrelated_error(self):
        assert not is_write_conflict(RuntimeError("boom"))
