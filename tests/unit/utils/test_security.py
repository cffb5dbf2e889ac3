from authflow.utils.security import hash_password, is_password_hash, verify_password


def test_hash_password_produces_bcrypt_hash():
    hashed = hash_password("S3cure-Passw0rd")

    assert hashed != "S3cure-Passw0rd"
    assert hashed.startswith("$2b$")
    assert is_password_hash(hashed)


def test_verify_password():
    hashed = hash_password("S3cure-Passw0rd")

    assert verify_password("S3cure-Passw0rd", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_plaintext_is_not_a_hash_and_never_verifies():
    assert is_password_hash("S3cure-Passw0rd") is False
    assert is_password_hash("") is False
    assert is_password_hash(None) is False
    assert verify_password("S3cure-Passw0rd", "S3cure-Passw0rd") is False
