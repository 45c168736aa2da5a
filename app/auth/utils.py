import random
import time

from passlib.context import CryptContext

from app.auth.constants import OTP_LENGTH

context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return context.verify(plain, hashed)


def generate_otp() -> str:
    """Return a zero-padded numeric code from the OS CSPRNG."""
    return f"{random.SystemRandom().randrange(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def is_well_formed_otp(code: str | None) -> bool:
    return bool(code) and len(code) == OTP_LENGTH and code.isascii() and code.isdigit()


def now_ms() -> int:
    return int(time.time() * 1000)
