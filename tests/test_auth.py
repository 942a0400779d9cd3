"""
Unit tests for authentication module
"""
import pytest

from app.auth import AuthGate, get_password_hash, verify_password
from app.errors import InvalidCredentials, InvalidInput, MissingFields, Unauthenticated, UsernameTaken
from app.services.sessions import Identity


@pytest.fixture
def gate(engine, session_store):
    return AuthGate(engine, session_store)


class TestPasswordHashing:
    def test_password_hashing(self):
        """Test password hashing and verification"""
        password = "test_password_123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert verify_password(password, hashed)
        assert not verify_password("wrong_password", hashed)

    def test_hashes_are_salted(self):
        assert get_password_hash("same") != get_password_hash("same")


class TestRegistration:
    def test_register(self, gate):
        identity = gate.register("alice", "pw")
        assert isinstance(identity, Identity)
        assert identity.username == "alice"
        assert identity.user_id is not None

    @pytest.mark.parametrize("username,password", [("", "pw"), ("alice", ""), ("   ", "pw"), (None, None)])
    def test_missing_fields(self, gate, username, password):
        with pytest.raises(MissingFields) as exc_info:
            gate.register(username, password)
        assert isinstance(exc_info.value, InvalidInput)

    def test_username_taken(self, gate):
        gate.register("alice", "pw")
        with pytest.raises(UsernameTaken) as exc_info:
            gate.register("alice", "other")
        assert exc_info.value.status_code == 400

    def test_usernames_are_case_sensitive(self, gate):
        gate.register("alice", "pw")
        assert gate.register("Alice", "pw").username == "Alice"


class TestLogin:
    def test_login_creates_session(self, gate):
        registered = gate.register("alice", "pw")
        identity, token = gate.login("alice", "pw")
        assert identity == registered
        assert token
        assert gate.current_user(token) == identity

    def test_wrong_password_and_unknown_user_look_identical(self, gate):
        gate.register("alice", "pw")
        with pytest.raises(InvalidCredentials) as wrong_password:
            gate.login("alice", "nope")
        with pytest.raises(InvalidCredentials) as unknown_user:
            gate.login("mallory", "nope")
        assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
        assert wrong_password.value.status_code == unknown_user.value.status_code

    def test_empty_credentials(self, gate):
        with pytest.raises(InvalidCredentials):
            gate.login("", "")

    def test_each_login_gets_its_own_token(self, gate):
        gate.register("alice", "pw")
        _, first = gate.login("alice", "pw")
        _, second = gate.login("alice", "pw")
        assert first != second


class TestCurrentUserAndLogout:
    @pytest.mark.parametrize("token", [None, "", "not-a-session"])
    def test_unknown_session(self, gate, token):
        with pytest.raises(Unauthenticated):
            gate.current_user(token)

    def test_logout_is_idempotent(self, gate):
        gate.register("alice", "pw")
        _, token = gate.login("alice", "pw")
        gate.logout(token)
        gate.logout(token)
        gate.logout(None)
        with pytest.raises(Unauthenticated):
            gate.current_user(token)
