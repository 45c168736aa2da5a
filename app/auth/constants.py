# ── Session token ────────────────────────────────────────────────────────────
ACCESS_TOKEN_EXPIRE_SECONDS: int = 86_400 * 7  # 7 days

# ── Password reset OTP ───────────────────────────────────────────────────────
OTP_LENGTH: int = 6
OTP_EXPIRE_SECONDS: int = 600  # 10 minutes

# ── Password policy ──────────────────────────────────────────────────────────
MIN_PASSWORD_LENGTH: int = 8
MAX_PASSWORD_LENGTH: int = 128

# ── Login welcome message, keyed by role ─────────────────────────────────────
WELCOME_MESSAGES: dict[str, str] = {
    "superadmin": "Welcome Super Admin!",
    "admin": "Welcome Admin!",
}
