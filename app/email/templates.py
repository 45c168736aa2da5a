"""
Email bodies. Each render_* function returns (subject, html_body, text_body).

Anything a visitor typed is HTML-escaped before it reaches the HTML body.
"""
from __future__ import annotations

from datetime import datetime, timezone
from html import escape

_NOT_PROVIDED = "Not provided"
_NO_SUBJECT = "No Subject"

_OTP_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Password Reset OTP</title>
</head>
<body style="font-family:Arial,sans-serif;line-height:1.6;color:#333;margin:0;padding:20px;background:#f5f5f5">
  <div style="max-width:600px;margin:0 auto;background:#fff;border-radius:8px;padding:30px">
    <div style="text-align:center;margin-bottom:30px">
      <h1>Password Reset Request</h1>
      <p>Use the OTP below to reset your password:</p>
    </div>
    <div style="font-size:32px;font-weight:bold;color:#2d3748;letter-spacing:5px;text-align:center;margin:20px 0;padding:15px;background:#f8f9fa;border-radius:5px">{otp}</div>
    <p style="color:#e53e3e;font-size:14px;text-align:center">This OTP will expire in {minutes} minutes.</p>
    <p>If you didn't request this password reset, please ignore this email.</p>
    <div style="margin-top:30px;padding-top:20px;border-top:1px solid #e2e8f0;text-align:center;color:#718096;font-size:12px">
      &copy; {year} {app_name}. All rights reserved.
    </div>
  </div>
</body>
</html>
"""


def render_otp_email(
    otp: str,
    app_name: str,
    expire_minutes: int = 10,
    now: datetime | None = None,
) -> tuple[str, str, str]:
    year = (now or datetime.now(timezone.utc)).year
    html_body = _OTP_HTML.format(
        otp=escape(otp),
        minutes=expire_minutes,
        year=year,
        app_name=escape(app_name),
    )
    text_body = (
        f"Your OTP is: {otp}\n\n"
        f"This OTP will expire in {expire_minutes} minutes.\n\n"
        "If you didn't request a password reset, please ignore this email."
    )
    return "Your Password Reset OTP", html_body, text_body


def render_contact_email(
    *,
    name: str,
    email: str,
    message: str,
    phone: str | None = None,
    organization: str | None = None,
    subject: str | None = None,
) -> tuple[str, str, str]:
    fields = [
        ("Name", name),
        ("Email", email),
        ("Phone", phone or _NOT_PROVIDED),
        ("Organization", organization or _NOT_PROVIDED),
        ("Subject", subject or _NO_SUBJECT),
    ]
    rows = "".join(
        f"<p><strong>{label}:</strong> {escape(value)}</p>\n" for label, value in fields
    )
    html_body = (
        '<div style="font-family:Arial,sans-serif;padding:20px">\n'
        "<h2>New Contact Form Submission</h2>\n"
        f"{rows}"
        "<p><strong>Message:</strong></p>\n"
        '<p style="white-space:pre-line;background:#f5f5f5;padding:15px;border-radius:5px">'
        f"{escape(message)}</p>\n"
        "</div>"
    )
    text_body = "New Contact Form Submission:\n" + "".join(
        f"{label}: {value}\n" for label, value in fields
    ) + f"Message: {message}\n"
    # Header injection guard: a subject line must stay on one line.
    subject_line = " ".join((subject or _NO_SUBJECT).split())
    return f"New Contact: {subject_line}", html_body, text_body
