from cashtrackr.core.email_templates import (
    CONFIRMATION_SUBJECT, RESET_SUBJECT, render_confirmation, render_password_reset,
)


def test_confirmation_email_embeds_token_and_link():
    email = render_confirmation("Juan", "123456", "http://front.test")
    assert email.subject == CONFIRMATION_SUBJECT
    assert "<b>123456</b>" in email.html
    assert 'href="http://front.test/auth/confirm-account"' in email.html


def test_reset_email_embeds_token_and_link():
    email = render_password_reset("Juan", "654321", "http://front.test")
    assert email.subject == RESET_SUBJECT
    assert "654321" in email.html
    assert "/auth/new-password" in email.html


def test_name_is_escaped():
    email = render_confirmation("<script>", "123456", "http://front.test")
    assert "<script>" not in email.html
    assert "&lt;script&gt;" in email.html
