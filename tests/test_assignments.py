from datetime import timedelta

from taskmaster.utils.datetime import utcnow


def test_create_derives_prices(make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(
        student["id"],
        word_count=2000,
        cost_per_word=2.5,
        writer_cost_per_word=1.5,
        paid_amount=2000,
    )
    assert assignment["price"] == 5000
    assert assignment["writer_price"] == 3000
    assert assignment["due"] == 3000
    assert assignment["writer_due"] == 3000
    assert assignment["status"] == "Pending"


def test_manual_price_kept_without_rates(make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"], word_count=2000, price=4200)
    assert assignment["price"] == 4200


def test_create_requires_student_and_title(client, auth_headers, make_student):
    student = make_student()
    deadline = (utcnow() + timedelta(days=1)).isoformat()

    response = client.post("/api/v1/assignments", json={"title": "Essay", "deadline": deadline}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Student and title are required."

    response = client.post(
        "/api/v1/assignments", json={"student_id": student["id"], "deadline": deadline}, headers=auth_headers
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1/assignments", json={"student_id": "ghost", "title": "Essay", "deadline": deadline}, headers=auth_headers
    )
    assert response.status_code == 404


def test_editing_word_count_rederives_price(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"], word_count=2000, cost_per_word=2.5)

    response = client.patch(
        f"/api/v1/assignments/{assignment['id']}", json={"word_count": 3000}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["assignment"]["price"] == 7500


def test_dissertation_chapters_follow_total(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"], type="Dissertation", total_chapters=3)
    assert assignment["is_dissertation"] is True
    assert assignment["chapter_progress"] == 0
    assert [c["chapter_number"] for c in assignment["chapters"]] == [1, 2, 3]

    response = client.patch(
        f"/api/v1/assignments/{assignment['id']}/chapters/2",
        json={"is_completed": True, "remarks": "Literature review signed off"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["chapters"][1]["is_completed"] is True
    assert response.json()["chapter_progress"] == 33

    response = client.patch(
        f"/api/v1/assignments/{assignment['id']}", json={"total_chapters": 5}, headers=auth_headers
    )
    chapters = response.json()["assignment"]["chapters"]
    assert len(chapters) == 5
    assert chapters[1]["is_completed"] is True
    assert response.json()["assignment"]["chapter_progress"] == 20

    response = client.patch(
        f"/api/v1/assignments/{assignment['id']}/chapters/9", json={"is_completed": True}, headers=auth_headers
    )
    assert response.status_code == 404


def test_first_completion_prompts_for_rating(client, auth_headers, make_student, make_writer, make_assignment):
    student = make_student()
    writer = make_writer()
    assignment = make_assignment(student["id"], writer_id=writer["id"], status="Under Review")
    url = f"/api/v1/assignments/{assignment['id']}/status"

    response = client.post(url, json={"status": "Completed"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["rating_prompt"] == writer["id"]
    assert response.json()["assignment"]["status"] == "Completed"

    response = client.post(url, json={"status": "Completed"}, headers=auth_headers)
    assert response.json()["rating_prompt"] is None


def test_completion_without_writer_has_no_prompt(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"])
    response = client.patch(
        f"/api/v1/assignments/{assignment['id']}", json={"status": "Completed"}, headers=auth_headers
    )
    assert response.json()["rating_prompt"] is None


def test_move_along_board(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"])
    url = f"/api/v1/assignments/{assignment['id']}/move"

    response = client.post(url, json={"direction": "forward"}, headers=auth_headers)
    assert response.json()["assignment"]["status"] == "In Progress"

    client.post(url, json={"direction": "back"}, headers=auth_headers)
    response = client.post(url, json={"direction": "back"}, headers=auth_headers)
    assert response.status_code == 400


def test_settle_marks_fully_paid(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"], price=5000, paid_amount=2000)
    url = f"/api/v1/assignments/{assignment['id']}/settle"

    response = client.post(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["paid_amount"] == 5000
    assert response.json()["due"] == 0

    assert client.post(url, headers=auth_headers).status_code == 400


def test_reassign_moves_payments_to_sunk_costs(client, auth_headers, make_student, make_writer, make_assignment):
    student = make_student()
    writer = make_writer()
    assignment = make_assignment(
        student["id"],
        writer_id=writer["id"],
        price=9000,
        writer_price=3000,
        writer_paid_amount=1000,
        sunk_costs=250,
    )

    response = client.post(f"/api/v1/assignments/{assignment['id']}/reassign", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["sunk_costs"] == 1250
    assert body["writer_id"] is None
    assert body["writer_paid_amount"] == 0
    assert body["writer_price"] == 0
    assert body["price"] == 9000

    response = client.post(f"/api/v1/assignments/{assignment['id']}/reassign", headers=auth_headers)
    assert response.status_code == 400


def test_list_filters(client, auth_headers, make_student, make_assignment):
    alice = make_student()
    bob = make_student(name="Bob Smith", email="bob@college.edu")
    make_assignment(alice["id"], title="Contract Law", priority="High")
    make_assignment(bob["id"], title="Thermodynamics", subject="Physics")
    make_assignment(
        bob["id"],
        title="Late Report",
        status="In Progress",
        deadline=(utcnow() - timedelta(days=1)).isoformat(),
    )

    def titles(**params):
        response = client.get("/api/v1/assignments", params=params, headers=auth_headers)
        assert response.status_code == 200
        return sorted(a["title"] for a in response.json())

    assert titles() == ["Contract Law", "Late Report", "Thermodynamics"]
    assert titles(priority="High") == ["Contract Law"]
    assert titles(status="In Progress") == ["Late Report"]
    assert titles(search="bob") == ["Late Report", "Thermodynamics"]
    assert titles(search="physics") == ["Thermodynamics"]
    assert titles(overdue_only="true") == ["Late Report"]


def test_deadline_state(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"], deadline=(utcnow() + timedelta(hours=3)).isoformat())

    state = client.get(f"/api/v1/assignments/{assignment['id']}/deadline", headers=auth_headers).json()
    assert state["is_overdue"] is False
    assert state["is_urgent"] is True


def test_bulk_delete_reports_failures(client, auth_headers, make_student, make_assignment):
    student = make_student()
    first = make_assignment(student["id"])
    second = make_assignment(student["id"], title="Second")

    response = client.post(
        "/api/v1/assignments/bulk-delete",
        json={"ids": [first["id"], "missing", second["id"]]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"attempted": 3, "deleted": 2, "failed": ["missing"]}
    assert client.get("/api/v1/assignments", headers=auth_headers).json() == []


def test_bulk_delete_counts_each_id_once(client, auth_headers, make_student, make_assignment):
    student = make_student()
    assignment = make_assignment(student["id"])

    response = client.post(
        "/api/v1/assignments/bulk-delete",
        json={"ids": [assignment["id"], assignment["id"]]},
        headers=auth_headers,
    )
    body = response.json()
    assert body == {"attempted": 1, "deleted": 1, "failed": []}
    assert body["attempted"] - body["deleted"] == len(body["failed"])
