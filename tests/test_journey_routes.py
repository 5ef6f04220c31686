from app.models.match_db.vector_store import VectorStore


def register(client, email, name="Someone"):
    response = client.post("/users/register", json={"email": email, "display_name": name})
    assert response.status_code == 200
    return response.json()["id"]


def verified_user(client, email, name="Someone", looking_for="kind and funny"):
    user_id = register(client, email, name)
    assert client.put(f"/users/{user_id}/verify-email").status_code == 200
    response = client.put(f"/users/{user_id}/looking-for", json={"looking_for_text": looking_for})
    assert response.status_code == 200
    return user_id


def answer(client, user_id, n):
    return client.post(
        f"/journey/{user_id}/answers",
        json={"question_id": f"q{n}", "question_text": f"Question {n}?", "answer_summary": f"Answer {n}"},
    )


def test_answers_are_listed_in_order(client):
    user_id = verified_user(client, "a@example.com")
    for n in range(1, 4):
        assert answer(client, user_id, n).status_code == 201

    response = client.get(f"/journey/{user_id}/answers")

    assert response.status_code == 200
    assert [a["question_id"] for a in response.json()] == ["q1", "q2", "q3"]


def test_answer_requires_verified_email(client):
    user_id = register(client, "b@example.com")
    response = answer(client, user_id, 1)
    assert response.status_code == 403
    assert response.json()["detail"] == "Email not verified"
    assert client.get(f"/journey/{user_id}/answers").json() == []


def test_answer_for_unknown_user(client):
    assert answer(client, "6f1c2c1e-1111-4c1b-9a1a-000000000000", 1).status_code == 404


def test_embedding_scheduled_from_third_answer(client, embedding_client):
    user_id = verified_user(client, "c@example.com")

    first = answer(client, user_id, 1).json()
    second = answer(client, user_id, 2).json()
    third = answer(client, user_id, 3).json()

    assert (first["embedding_scheduled"], second["embedding_scheduled"]) == (False, False)
    assert third == {"ok": True, "answer_count": 3, "embedding_scheduled": True}
    assert len(embedding_client.texts) == 1
    assert embedding_client.texts[0].startswith("Looking for: kind and funny\n\nJourney Q&A:\nQ1: Question 1?")

    status = client.get(f"/users/{user_id}/status").json()
    assert status["profile_ready"] is True
    assert status["answer_count"] == 3


def test_every_answer_past_threshold_recomputes(client, embedding_client):
    user_id = verified_user(client, "d@example.com")
    for n in range(1, 5):
        answer(client, user_id, n)

    assert len(embedding_client.texts) == 2
    assert "Q4: Question 4?" in embedding_client.texts[-1]


def test_two_answers_not_ready_then_match_after_third(client, embedding_client):
    a = verified_user(client, "alice@example.com", "Alice")
    b = verified_user(client, "bob@example.com", "Bob")
    for n in range(1, 4):
        answer(client, b, n)

    answer(client, a, 1)
    answer(client, a, 2)
    not_ready = client.get(f"/matching/{a}", params={"limit": 20})
    assert not_ready.status_code == 409
    assert "Answer more journey questions" in not_ready.json()["detail"]

    answer(client, a, 3)
    response = client.get(f"/matching/{a}", params={"limit": 20})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert [m["user_id"] for m in body["matches"]] == [b]
    assert body["matches"][0]["display_name"] == "Bob"
    assert 1 <= body["matches"][0]["confidence_percent"] <= 99


def test_failed_embedding_does_not_fail_answer_and_retries(client, embedding_client, session_factory):
    user_id = verified_user(client, "e@example.com")
    answer(client, user_id, 1)
    answer(client, user_id, 2)

    embedding_client.fail = True
    response = answer(client, user_id, 3)
    assert response.status_code == 201
    assert response.json()["embedding_scheduled"] is True

    db = session_factory()
    try:
        assert VectorStore(db, dimension=3).get_vector(user_id) is None
    finally:
        db.close()
    assert client.get(f"/matching/{user_id}").status_code == 409

    embedding_client.fail = False
    answer(client, user_id, 4)

    db = session_factory()
    try:
        assert VectorStore(db, dimension=3).get_vector(user_id) is not None
    finally:
        db.close()
    assert len(embedding_client.texts) == 2
