from datetime import datetime, timedelta

import pytest

from bakery.domain.value_objects.oauth_profile import GoogleProfile
from bakery.domain.value_objects.one_time_code import OneTimeCode, code_matches
from bakery.domain.value_objects.security_decisions import minutes_until

NOW = datetime(2024, 5, 1, 12, 0, 0)


def test_generated_code_is_six_digits_with_expiry():
    code = OneTimeCode.generate(timedelta(minutes=15), now=NOW)

    assert len(code.value) == 6
    assert code.value.isdigit()
    assert code.expires_at == NOW + timedelta(minutes=15)


def test_code_matches_only_live_equal_codes():
    expires = NOW + timedelta(minutes=15)

    assert code_matches("012345", expires, " 012345 ", now=NOW) is True
    assert code_matches("012345", expires, "012346", now=NOW) is False
    assert code_matches("012345", expires, "012345", now=expires + timedelta(seconds=1)) is False
    assert code_matches(None, expires, "012345", now=NOW) is False
    assert code_matches("012345", None, "012345", now=NOW) is False


def test_minutes_until_rounds_up_with_floor_of_one():
    assert minutes_until(900, 0) == 15
    assert minutes_until(61, 0) == 2
    assert minutes_until(10, 10) == 1


def test_google_profile_from_userinfo():
    profile = GoogleProfile.from_userinfo(
        {"sub": "1234", "email": "Maria@Gmail.com", "given_name": "María", "family_name": "Gómez"}
    )

    assert profile.google_id == "1234"
    assert profile.email == "maria@gmail.com"
    assert (profile.first_name, profile.last_name) == ("María", "Gómez")


def test_google_profile_name_fallbacks():
    from_display = GoogleProfile(google_id="1", email="ana@gmail.com", display_name="Ana María Ruiz")
    from_email = GoogleProfile(google_id="2", email="pedro@gmail.com")

    assert (from_display.first_name, from_display.last_name) == ("Ana", "María Ruiz")
    assert (from_email.first_name, from_email.last_name) == ("pedro", "User")


@pytest.mark.parametrize("userinfo", [{"email": "a@b.com"}, {"sub": "1"}])
def test_google_profile_requires_subject_and_email(userinfo):
    with pytest.raises(ValueError):
        GoogleProfile.from_userinfo(userinfo)
