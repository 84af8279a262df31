"""Integration tests for RememberMeTokenRepository on SQLite."""

from datetime import timedelta

import pytest

from tests.utils.utils import START, make_token


@pytest.mark.integration
class TestRememberMeTokenRepository:
    """Test token persistence."""

    async def test_save_and_find(self, token_repository):
        token = make_token()

        await token_repository.save(token)

        assert await token_repository.find_by_hash(token.token_hash) == token
        assert await token_repository.find_by_hash("0" * 64) is None

    async def test_find_hashes_by_user(self, token_repository):
        first = make_token()
        second = make_token()
        other = make_token(user_id="user-2")
        for token in (first, second, other):
            await token_repository.save(token)

        hashes = await token_repository.find_hashes_by_user_id("user-1")

        assert set(hashes) == {first.token_hash, second.token_hash}

    async def test_delete_many(self, token_repository):
        token = make_token()
        await token_repository.save(token)

        deleted = await token_repository.delete_many([token.token_hash, "0" * 64])

        assert deleted == [token.token_hash]
        assert await token_repository.find_by_hash(token.token_hash) is None

    async def test_delete_expired(self, token_repository):
        expired = make_token(ttl_ms=1000)
        alive = make_token()
        await token_repository.save(expired)
        await token_repository.save(alive)

        removed = await token_repository.delete_expired(before=START + timedelta(seconds=1))

        assert removed == [(expired.token_hash, "user-1")]
        assert await token_repository.find_by_hash(alive.token_hash) == alive
