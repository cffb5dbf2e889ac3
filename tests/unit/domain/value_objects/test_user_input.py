import pytest
from pydantic import ValidationError

from authflow.domain.entities.user import Role
from authflow.domain.value_objects import UserInput


def test_valid_input_is_normalized():
    user_input = UserInput(
        login="  ivan_the-first ", password="LongEnough1", email="Ivan@Example.COM"
    )

    assert user_input.login == "ivan_the-first"
    assert user_input.email == "ivan@example.com"
    assert user_input.role == Role.USER


@pytest.mark.parametrize("login", ["ab", "has space", "semi;colon", "x" * 51])
def test_invalid_login_is_rejected(login):
    with pytest.raises(ValidationError):
        UserInput(login=login, password="LongEnough1", email="user@example.com")


def test_short_password_is_rejected():
    with pytest.raises(ValidationError):
        UserInput(login="judy", password="short", email="judy@example.com")


def test_invalid_email_is_rejected():
    with pytest.raises(ValidationError):
        UserInput(login="judy", password="LongEnough1", email="not-an-email")


def test_password_is_hidden_from_repr():
    user_input = UserInput(login="judy", password="LongEnough1", email="judy@example.com")

    assert "LongEnough1" not in repr(user_input)
