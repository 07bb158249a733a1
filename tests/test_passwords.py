from travel_api.services.passwords import hash_password, password_looks_hashed, verify_password


def test_hash_and_verify():
    hashed = hash_password("secret123", rounds=4)

    assert hashed != "secret123"
    assert password_looks_hashed(hashed)
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_long_passwords_are_truncated_consistently():
    hashed = hash_password("x" * 100, rounds=4)

    assert verify_password("x" * 72, hashed)


def test_malformed_hash_never_verifies():
    assert not verify_password("secret123", "not-a-bcrypt-hash")
    assert not verify_password("secret123", "")
