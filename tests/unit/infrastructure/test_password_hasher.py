def test_hash_and_verify(password_hasher):
    hashed = password_hasher.hash("Str0ng!Pass")

    assert hashed.startswith("$2b$")
    assert hashed != "Str0ng!Pass"
    assert password_hasher.verify("Str0ng!Pass", hashed) is True
    assert password_hasher.verify("str0ng!pass", hashed) is False


def test_verify_without_hash_fails(password_hasher):
    assert password_hasher.verify("anything", None) is False
    assert password_hasher.verify("anything", "") is False
