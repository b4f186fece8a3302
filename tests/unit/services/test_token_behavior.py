"""Tests for the pure token mutation planner."""

from datetime import timedelta

import pytest

from token_manager_core.enums import TokenBehavior
from token_manager_core.services import MutationKind, TokenRequest, plan_token_mutation
from token_manager_core.services.token_behavior import BEHAVIOR_HANDLERS
from tests.fixtures.factories import BASE_TIME, TokenFactory


@pytest.fixture
def request_for():
    def _request(behavior=TokenBehavior.ADD):
        return TokenRequest(
            entity_name="users",
            entity_id=7,
            type="pin",
            behavior=behavior,
            remaining_uses=3,
            expiration_at=BASE_TIME + timedelta(seconds=60),
            created_at=BASE_TIME,
            code_length=8,
        )

    return _request


class TestPlanTokenMutation:
    """Test plan_token_mutation."""

    @pytest.mark.parametrize("behavior", list(TokenBehavior))
    def test_no_existing_token_inserts(self, request_for, behavior):
        mutation = plan_token_mutation(None, request_for(behavior))

        assert mutation.kind == MutationKind.INSERT_NEW
        assert mutation.existing is None
        assert mutation.needs_code
        assert mutation.needs_save

    @pytest.mark.parametrize(
        "existing_behavior, kind, needs_code, needs_save",
        [
            (TokenBehavior.ADD, MutationKind.INSERT_NEW, True, True),
            (TokenBehavior.UNIQUE, MutationKind.NO_OP, False, False),
            (TokenBehavior.RENEW, MutationKind.KEEP_CODE, False, True),
            (TokenBehavior.REPLACE, MutationKind.REPLACE_CODE, True, True),
        ],
    )
    def test_existing_behavior_decides(
        self, request_for, existing_behavior, kind, needs_code, needs_save
    ):
        existing = TokenFactory(id=4, behavior=existing_behavior)

        mutation = plan_token_mutation(existing, request_for(TokenBehavior.ADD))

        assert mutation.kind == kind
        assert mutation.needs_code is needs_code
        assert mutation.needs_save is needs_save

    @pytest.mark.parametrize("request_behavior", list(TokenBehavior))
    def test_request_behavior_is_ignored_when_token_exists(self, request_for, request_behavior):
        existing = TokenFactory(id=4, behavior=TokenBehavior.UNIQUE)

        mutation = plan_token_mutation(existing, request_for(request_behavior))

        assert mutation.kind == MutationKind.NO_OP
        assert mutation.existing is existing

    def test_updates_carry_the_existing_token(self, request_for):
        existing = TokenFactory(id=4, behavior=TokenBehavior.RENEW)
        request = request_for()

        mutation = plan_token_mutation(existing, request)

        assert mutation.existing is existing
        assert mutation.request is request

    def test_planning_does_not_touch_the_token(self, request_for):
        existing = TokenFactory(id=4, behavior=TokenBehavior.REPLACE, code="KEEPME12")
        before = existing.model_dump()

        plan_token_mutation(existing, request_for())

        assert existing.model_dump() == before

    def test_every_behavior_has_a_handler(self):
        assert set(BEHAVIOR_HANDLERS) == set(TokenBehavior)
