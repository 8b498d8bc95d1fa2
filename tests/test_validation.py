import pytest

from whitelist_bot.core.errors import ValidationError
from whitelist_bot.core.validation import validate_submission, word_count


def test_word_count_ignores_whitespace_runs() -> None:
    assert word_count("  one\ttwo\n\nthree   ") == 3
    assert word_count("") == 0


def test_valid_payload_passes_with_defaults(payload) -> None:
    submission = validate_submission(payload)
    assert submission.character_name == "Tommy Vercetti"
    assert submission.content_creation is None
    assert submission.previous_servers is None
    assert submission.rules_read is False
    assert submission.cfx_linked is False


def test_snake_case_keys_are_accepted(words) -> None:
    payload = {
        "discord_id": "1",
        "steam_id": "2",
        "about_yourself": words(50),
        "rp_experience": words(50),
        "character_name": "Name",
        "character_age": "20",
        "character_nationality": "Italian",
        "character_backstory": "b" * 100,
        "rules_read": True,
    }
    submission = validate_submission(payload)
    assert submission.rules_read is True


def test_blank_optional_fields_become_none(make_payload) -> None:
    submission = validate_submission(
        make_payload(contentCreation="   ", previousServers="NoPixel")
    )
    assert submission.content_creation is None
    assert submission.previous_servers == "NoPixel"


def test_unknown_keys_are_ignored(make_payload) -> None:
    submission = validate_submission(make_payload(userId="spoofed", status="approved"))
    assert not hasattr(submission, "status")


def test_short_about_yourself_is_rejected(make_payload, words) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(make_payload(aboutYourself=words(49)))
    assert excinfo.value.fields == ["about_yourself"]
    assert "50 words" in excinfo.value.errors[0].message


def test_word_count_not_character_count(make_payload) -> None:
    # 300 characters but a single word
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(make_payload(rpExperience="z" * 300))
    assert excinfo.value.fields == ["rp_experience"]


def test_backstory_minimum_length(make_payload) -> None:
    validate_submission(make_payload(characterBackstory="y" * 100))
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(make_payload(characterBackstory="y" * 99))
    assert excinfo.value.fields == ["character_backstory"]


def test_every_problem_is_reported(make_payload, words) -> None:
    payload = make_payload(
        aboutYourself="too short",
        rpExperience=words(10),
        characterBackstory="short",
        characterAge=" ",
    )
    del payload["steamId"]
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(payload)
    assert set(excinfo.value.fields) == {
        "about_yourself",
        "rp_experience",
        "character_backstory",
        "character_age",
        "steam_id",
    }
    messages = {e.field: e.message for e in excinfo.value.errors}
    assert messages["steam_id"] == "Steam Hex ID is required"
    assert messages["character_age"] == "Character age is required"


def test_non_mapping_payload() -> None:
    with pytest.raises(ValidationError):
        validate_submission(["not", "a", "dict"])


def test_numeric_fields_from_json_are_coerced(make_payload) -> None:
    submission = validate_submission(make_payload(characterAge=34, discordId=781463891985669475))
    assert submission.character_age == "34"
    assert submission.discord_id == "781463891985669475"
