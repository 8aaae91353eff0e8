import bcrypt

from src.shared.infrastructure.security import hash_password


async def test_hash_is_a_bcrypt_hash_of_the_password():
    hashed = await hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert bcrypt.checkpw(b"s3cret-pass", hashed.encode("utf-8"))
    assert not bcrypt.checkpw(b"wrong-pass", hashed.encode("utf-8"))


async def test_hashes_are_salted():
    assert await hash_password("same-password") != await hash_password("same-password")


async def test_multibyte_password_within_72_bytes():
    password = "é" * 36
    hashed = await hash_password(password)
    assert bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
