import bcrypt

from truckticket.core.config import get_settings


def hash_pin(pin: str) -> str:
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_pin(pin: str, pin_hash: str) -> bool:
    return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
