from services.auth_service import is_admin_email, parse_admin_emails


def test_parse_admin_emails_normalizes():
    assert parse_admin_emails(" GM@Example.com, ,dm@example.com") == {"gm@example.com", "dm@example.com"}
    assert parse_admin_emails(["A@x.io", ""]) == {"a@x.io"}


def test_allow_list_matches_case_insensitively():
    assert is_admin_email("GM@example.com", ["gm@example.com"])
    assert not is_admin_email("player@example.com", ["gm@example.com"])


def test_empty_allow_list_admits_signed_in_users():
    assert is_admin_email("anyone@example.com", [])


def test_missing_email_is_never_admin():
    assert not is_admin_email(None, [])
    assert not is_admin_email("", ["gm@example.com"])
