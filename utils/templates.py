"""Plain HTML bodies for outgoing mail. Each helper returns (subject, html)."""
from datetime import datetime
from html import escape
from typing import Tuple


def _layout(title: str, color: str, body: str) -> str:
    return (
        f'<div style="background-color: {color}; padding: 5px 15px;">'
        f'<h1 style="color: white;">{escape(title)}</h1></div>'
        f'<div style="font-size: 16px; padding: 5px 15px;">{body}</div>'
    )


def _link_body(greeting_name: str, label: str, link: str) -> str:
    return (
        f"<div>Hi <b>{escape(greeting_name or 'there')}</b>!</div><br>"
        f"<div><b>{escape(label)}:</b></div><br>"
        f'<div><a href="{escape(link)}">{escape(link)}</a></div>'
    )


def account_recovery(app_name: str, link: str, user_name: str) -> Tuple[str, str]:
    subject = f"{app_name}: Account Recovery"
    return subject, _layout(subject, "#006d0d", _link_body(user_name, "Your Account Recovery link", link))


def password_recovery(app_name: str, link: str, user_name: str) -> Tuple[str, str]:
    subject = f"{app_name}: Password Recovery"
    return subject, _layout(subject, "#006d0d", _link_body(user_name, "Your Password Recovery link", link))


def email_verification(app_name: str, link: str, user_name: str) -> Tuple[str, str]:
    subject = f"{app_name}: Email Verification"
    return subject, _layout(subject, "#00416d", _link_body(user_name, "Your Email Verification link", link))


def internal_error(app_name: str, env: str, error: str) -> Tuple[str, str]:
    subject = f"{app_name}: INTERNAL SERVER ERROR [{env.upper()}]"
    body = (
        "<div><b>This is a notification about an internal error!</b></div>"
        f"<div><b>Error message:</b></div><div><pre>{escape(error)}</pre></div>"
        f"<div><b>Date:</b></div><div>{datetime.utcnow().isoformat()}Z</div>"
    )
    return subject, _layout(subject, "#7a0004", body)
