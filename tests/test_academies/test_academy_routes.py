"""Tests for academies, athletes, classes and groups routes."""

import pytest

from gymnasaas.db.models import Academy, Group, PlanCode, Profile, UserRole


class TestAcademies:
    def test_list_own_academies(self, authenticated_client, db, test_academy):
        other = Academy(tenant_id="other-tenant", name="Ajena")
        db.add(other)
        db.commit()

        response = authenticated_client.get("/api/academies")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [test_academy.id]

    def test_free_plan_allows_one_academy(self, authenticated_client, test_academy):
        response = authenticated_client.post("/api/academies", json={"name": "Segunda sede"})

        assert response.status_code == 402
        data = response.json()
        assert data["error"] == "ACADEMY_LIMIT_REACHED"
        assert data["upgrade_to"] == "pro"

    def test_pro_plan_allows_more(
        self, authenticated_client, test_tenant, test_academy, plans, subscribe
    ):
        subscribe(test_tenant, plans[PlanCode.PRO])

        response = authenticated_client.post(
            "/api/academies", json={"name": "Segunda sede", "city": "Madrid"}
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == test_tenant.id

    def test_public_directory_search(self, client, db, test_academy):
        db.add(Academy(tenant_id=test_academy.tenant_id, name="Club 100%", is_public=True))
        db.add(Academy(tenant_id=test_academy.tenant_id, name="Privada", is_public=False))
        db.commit()

        response = client.get("/api/public/academies", params={"q": "100%"})

        assert response.status_code == 200
        assert [a["name"] for a in response.json()] == ["Club 100%"]


class TestAthletes:
    def test_create_and_list(self, authenticated_client, test_academy):
        response = authenticated_client.post(
            "/api/athletes",
            json={"academy_id": test_academy.id, "name": "Lucía", "level": "nivel 3"},
        )
        assert response.status_code == 201

        response = authenticated_client.get("/api/athletes", params={"academy_id": test_academy.id})
        assert [a["name"] for a in response.json()] == ["Lucía"]

    def test_unknown_academy(self, authenticated_client, test_user):
        response = authenticated_client.post(
            "/api/athletes", json={"academy_id": "missing", "name": "Lucía"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "ACADEMY_NOT_FOUND"


class TestGroupsAndClasses:
    def test_group_limit_on_free(self, authenticated_client, db, test_tenant, test_academy):
        for i in range(3):
            db.add(Group(tenant_id=test_tenant.id, academy_id=test_academy.id, name=f"G{i}"))
        db.commit()

        response = authenticated_client.post(
            "/api/groups", json={"academy_id": test_academy.id, "name": "Cuarto"}
        )

        assert response.status_code == 402
        data = response.json()
        assert data["error"] == "LIMIT_REACHED"
        assert data["resource"] == "groups"
        assert data["limit"] == 3
        assert data["current"] == 3

    def test_create_class(self, authenticated_client, test_academy):
        response = authenticated_client.post(
            "/api/classes",
            json={"academy_id": test_academy.id, "name": "Suelo", "capacity": 12},
        )

        assert response.status_code == 201
        assert response.json()["capacity"] == 12


@pytest.fixture
def member_headers(db, test_tenant, auth_headers):
    """Headers for a profile of ``test_tenant`` holding a given role."""

    def _headers(role: UserRole) -> dict[str, str]:
        profile = Profile(user_id=f"user-{role.value}", tenant_id=test_tenant.id, role=role)
        db.add(profile)
        db.commit()
        return auth_headers(profile)

    return _headers


class TestCreationRoles:
    @pytest.mark.parametrize("role", [UserRole.COACH, UserRole.ATHLETE, UserRole.PARENT])
    def test_only_owners_create_academies(
        self, client, db, test_tenant, plans, subscribe, member_headers, role
    ):
        subscribe(test_tenant, plans[PlanCode.PRO])

        response = client.post(
            "/api/academies", json={"name": "Sede nueva"}, headers=member_headers(role)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"
        assert db.query(Academy).count() == 0

    @pytest.mark.parametrize("role", [UserRole.COACH, UserRole.ATHLETE, UserRole.PARENT])
    def test_only_owners_create_groups(self, client, test_academy, member_headers, role):
        response = client.post(
            "/api/groups",
            json={"academy_id": test_academy.id, "name": "Pre-equipo"},
            headers=member_headers(role),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    @pytest.mark.parametrize("role", [UserRole.ATHLETE, UserRole.PARENT])
    def test_athletes_and_parents_cannot_enroll_or_schedule(
        self, client, test_academy, member_headers, role
    ):
        headers = member_headers(role)

        athlete = client.post(
            "/api/athletes",
            json={"academy_id": test_academy.id, "name": "Lucía"},
            headers=headers,
        )
        training = client.post(
            "/api/classes",
            json={"academy_id": test_academy.id, "name": "Suelo"},
            headers=headers,
        )

        assert athlete.status_code == 403
        assert training.status_code == 403

    def test_coach_can_enroll_and_schedule(self, client, test_academy, member_headers):
        headers = member_headers(UserRole.COACH)

        athlete = client.post(
            "/api/athletes",
            json={"academy_id": test_academy.id, "name": "Lucía"},
            headers=headers,
        )
        training = client.post(
            "/api/classes",
            json={"academy_id": test_academy.id, "name": "Suelo"},
            headers=headers,
        )

        assert athlete.status_code == 201
        assert training.status_code == 201
