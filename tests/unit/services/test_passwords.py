from src.app.services.passwords import burn_password_check, hash_password, verify_password


def test_hash_and_verify():
    password_hash = hash_password("SecurePass123!")

    assert password_hash.startswith("$2")
    assert verify_password("SecurePass123!", password_hash)
    assert not verify_password("WrongPass123!", password_hash)


def test_verify_rejects_empty_or_malformed_hash():
    assert not verify_password("anything", "")
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_burn_password_check_returns_nothing():
    assert burn_password_check("whatever") is None
