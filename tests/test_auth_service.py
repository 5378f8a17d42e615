"""
Tests for the signup / login credential flow against a real (SQLite) store.
"""

import pytest
from sqlalchemy import text

from auth import service
from auth.password import hash_password
from database.users import get_user_by_username
from utils.errors import InvalidCredentials, PersistenceError, UsernameTaken, ValidationError

DUMMY_HASH = hash_password("placeholder", rounds=4)


class TestSignupLogin:
    @pytest.mark.asyncio
    async def test_signup_then_login_same_user(self, session_factory, tokens):
        async with session_factory() as session:
            signed_up = await service.signup(session, tokens, "alice", "pw", rounds=4)
        async with session_factory() as session:
            logged_in = await service.login(session, tokens, "alice", "pw", DUMMY_HASH)

        assert signed_up["user"]["id"] == logged_in["user"]["id"]
        assert tokens.verify(signed_up["token"]).id == signed_up["user"]["id"]
        assert tokens.verify(logged_in["token"]).id == signed_up["user"]["id"]
        assert "password" not in signed_up["user"]
        assert logged_in["user"]["avatar"] == ""

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, session_factory, tokens):
        async with session_factory() as session:
            await service.signup(session, tokens, "alice", "pw", rounds=4)
            user = await get_user_by_username(session, "alice")
        assert user.password != "pw"
        assert user.password.startswith("$2b$04$")

    @pytest.mark.asyncio
    async def test_duplicate_username(self, session_factory, tokens):
        async with session_factory() as session:
            first = await service.signup(session, tokens, "alice", "pw", avatar="a.png", rounds=4)
        async with session_factory() as session:
            with pytest.raises(UsernameTaken):
                await service.signup(session, tokens, "alice", "other", rounds=4)
        async with session_factory() as session:
            user = await get_user_by_username(session, "alice")
            again = await service.login(session, tokens, "alice", "pw", DUMMY_HASH)
        assert str(user.id) == first["user"]["id"]
        assert user.avatar == "a.png"
        assert again["user"]["id"] == first["user"]["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("", "pw"), ("bob", ""), ("", "")])
    async def test_signup_requires_fields(self, session_factory, tokens, username, password):
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await service.signup(session, tokens, username, password, rounds=4)

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, session_factory, tokens):
        async with session_factory() as session:
            await service.signup(session, tokens, "alice", "pw", rounds=4)
        async with session_factory() as session:
            with pytest.raises(InvalidCredentials) as wrong_pw:
                await service.login(session, tokens, "alice", "nope", DUMMY_HASH)
            with pytest.raises(InvalidCredentials) as no_user:
                await service.login(session, tokens, "nobody", "pw", DUMMY_HASH)
        assert type(wrong_pw.value) is type(no_user.value)
        assert wrong_pw.value.message == no_user.value.message

    @pytest.mark.asyncio
    async def test_login_is_case_sensitive(self, session_factory, tokens):
        async with session_factory() as session:
            await service.signup(session, tokens, "Alice", "pw", rounds=4)
        async with session_factory() as session:
            with pytest.raises(InvalidCredentials):
                await service.login(session, tokens, "alice", "pw", DUMMY_HASH)

    @pytest.mark.asyncio
    async def test_unknown_user_checks_supplied_dummy_hash(self, session_factory, tokens, monkeypatch):
        checked = []

        def fake_verify(password, password_hash):
            checked.append(password_hash)
            return True

        monkeypatch.setattr(service, "verify_password", fake_verify)
        async with session_factory() as session:
            with pytest.raises(InvalidCredentials):
                await service.login(session, tokens, "nobody", "pw", DUMMY_HASH)
        assert checked == [DUMMY_HASH]


class TestSignupStoreFailure:
    @pytest.mark.asyncio
    async def test_missing_table_is_a_persistence_error(self, session_factory, tokens):
        async with session_factory() as session:
            await session.execute(text("DROP TABLE messages"))
            await session.execute(text("DROP TABLE users"))
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(PersistenceError) as err:
                await service.signup(session, tokens, "alice", "pw", rounds=4)

        assert not isinstance(err.value, UsernameTaken)
        assert "users" in err.value.message
        assert "\n" not in err.value.message
