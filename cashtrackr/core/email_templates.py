"""Email Templates — subjects and HTML bodies for account emails.

Invariants:
    - Every template embeds the opaque token verbatim and a link to the frontend page
      where it is entered
    - User-supplied values (name) are HTML-escaped
"""

from dataclasses import dataclass
from html import escape


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


CONFIRMATION_SUBJECT = "CashTrackr - Confirma tu cuenta"
RESET_SUBJECT = "CashTrackr - Reestablece tu password"


def render_confirmation(name: str, token: str, frontend_url: str) -> RenderedEmail:
    html = (
        f"<p>Hola: {escape(name)}, has creado tu cuenta en CashTrackr, "
        f"ya casi esta lista</p>"
        f"<p>Visita el siguiente enlace:</p>"
        f'<a href="{frontend_url}/auth/confirm-account">Confirmar cuenta</a>'
        f"<p>e ingresa el codigo: <b>{token}</b></p>"
    )
    return RenderedEmail(CONFIRMATION_SUBJECT, html)


def render_password_reset(name: str, token: str, frontend_url: str) -> RenderedEmail:
    html = (
        f"<p>Hola: {escape(name)}, has solicitado reestablecer tu password</p>"
        f"<p>Visita el siguiente enlace:</p>"
        f'<a href="{frontend_url}/auth/new-password">Reestablecer password</a>'
        f"<p>e ingresa el codigo: <b>{token}</b></p>"
    )
    return RenderedEmail(RESET_SUBJECT, html)
