from datetime import timedelta

from taskmaster.utils.datetime import utcnow


def test_create_and_list_students(client, auth_headers, make_student):
    alice = make_student()
    make_student(name="Bob Smith", email="bob@college.edu", university="Cambridge")

    response = client.get("/api/v1/students", headers=auth_headers)
    assert response.status_code == 200
    assert {s["name"] for s in response.json()} == {"Alice Johnson", "Bob Smith"}

    response = client.get("/api/v1/students", params={"search": "cambridge"}, headers=auth_headers)
    assert [s["name"] for s in response.json()] == ["Bob Smith"]

    response = client.get(f"/api/v1/students/{alice['id']}", headers=auth_headers)
    assert response.json()["email"] == "alice@uni.edu"


def test_student_cannot_refer_themselves(client, auth_headers, make_student):
    """A save that names the student as their own referrer is rejected."""
    alice = make_student()

    response = client.patch(
        f"/api/v1/students/{alice['id']}",
        json={"referred_by": alice["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 400

    stored = client.get(f"/api/v1/students/{alice['id']}", headers=auth_headers).json()
    assert stored["referred_by"] is None


def test_unknown_referrer_rejected(client, auth_headers):
    response = client.post(
        "/api/v1/students",
        json={"name": "Carol", "email": "carol@uni.edu", "referred_by": "missing"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_missing_student_returns_404(client, auth_headers):
    assert client.get("/api/v1/students/nope", headers=auth_headers).status_code == 404


def test_student_summary_and_referral_network(client, auth_headers, make_student, make_assignment):
    alice = make_student()
    bob = make_student(name="Bob Smith", email="bob@college.edu", referred_by=alice["id"])

    make_assignment(alice["id"], price=15000, paid_amount=5000)
    make_assignment(alice["id"], title="Dissertation", price=8000, paid_amount=0)
    make_assignment(bob["id"], price=3000, paid_amount=1000)

    summary = client.get(f"/api/v1/students/{alice['id']}/summary", headers=auth_headers).json()
    assert summary["assignment_count"] == 2
    assert summary["total_projected"] == 23000
    assert summary["total_paid"] == 5000
    assert summary["total_due"] == 18000
    assert summary["is_vip"] is True
    assert [r["id"] for r in summary["referrals"]] == [bob["id"]]
    assert summary["network_revenue"] == 3000

    summary = client.get(f"/api/v1/students/{bob['id']}/summary", headers=auth_headers).json()
    assert summary["is_vip"] is False
    assert summary["referrer"]["id"] == alice["id"]

    listed = client.get(f"/api/v1/students/{alice['id']}/assignments", headers=auth_headers).json()
    assert len(listed) == 2


def test_delete_student_restricted_while_assignments_exist(client, auth_headers, make_student, make_assignment):
    alice = make_student()
    make_assignment(alice["id"])

    response = client.delete(f"/api/v1/students/{alice['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert client.get(f"/api/v1/students/{alice['id']}", headers=auth_headers).status_code == 200


def test_delete_student_cascade(client, auth_headers, make_student, make_assignment, settings_env):
    settings_env(delete_policy="cascade")
    alice = make_student()
    bob = make_student(name="Bob Smith", email="bob@college.edu", referred_by=alice["id"])
    make_assignment(alice["id"], deadline=(utcnow() + timedelta(days=1)).isoformat())

    response = client.delete(f"/api/v1/students/{alice['id']}", headers=auth_headers)
    assert response.status_code == 204

    assert client.get("/api/v1/assignments", headers=auth_headers).json() == []
    assert client.get(f"/api/v1/students/{bob['id']}", headers=auth_headers).json()["referred_by"] is None


def test_null_for_required_field_keeps_stored_value(client, auth_headers, make_student):
    alice = make_student()

    response = client.patch(
        f"/api/v1/students/{alice['id']}",
        json={"name": None, "phone": None, "is_flagged": None, "remarks": "Pays late"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Alice Johnson"
    assert body["phone"] == "555-0101"
    assert body["is_flagged"] is False
    assert body["remarks"] == "Pays late"

    response = client.patch(f"/api/v1/students/{alice['id']}", json={"remarks": None}, headers=auth_headers)
    assert response.json()["remarks"] is None
