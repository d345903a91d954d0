from httpx import AsyncClient

from app.services.admin_service import AdminService

ADMIN = "/api/v1/admin"


async def publish(client: AsyncClient, headers: dict, **overrides) -> dict:
    data = {
        "title": "Weekly current affairs",
        "content": "<p>Body</p>",
        "excerpt": "Excerpt",
        "published": True,
    }
    data.update(overrides)
    response = await client.post("/api/v1/blogs", json=data, headers=headers)
    return response.json()["blog"]


async def test_stats_for_admin(client: AsyncClient, admin, author, reader, auth_headers):
    blog = await publish(client, auth_headers(author))
    await publish(client, auth_headers(author), published=False)
    await client.post(f"/api/v1/blogs/{blog['id']}/like", headers=auth_headers(reader))
    await client.post(
        f"/api/v1/blogs/{blog['id']}/comments",
        json={"content": "Helpful"},
        headers=auth_headers(reader),
    )
    await client.get(f"/api/v1/blogs/{blog['id']}")

    response = await client.get(f"{ADMIN}/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["users"] == {
        "totalStudents": 2,
        "totalAdmins": 1,
        "activeUsers": 2,
        "totalUsers": 3,
    }
    assert stats["blogs"] == {
        "total": 2,
        "published": 1,
        "draft": 1,
        "totalViews": 1,
        "totalLikes": 1,
        "totalComments": 1,
    }
    assert stats["courses"]["total"] == 0


async def test_stats_forbidden_for_students(client: AsyncClient, reader, auth_headers):
    response = await client.get(f"{ADMIN}/stats", headers=auth_headers(reader))

    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Admin access required"}


async def test_stats_requires_login(client: AsyncClient, database):
    response = await client.get(f"{ADMIN}/stats")

    assert response.status_code == 401


async def test_list_students(client: AsyncClient, admin, author, reader, auth_headers):
    response = await client.get(f"{ADMIN}/students", headers=auth_headers(admin))

    assert response.status_code == 200
    students = response.json()["students"]
    assert {s["email"] for s in students} == {author.email, reader.email}
    first = students[0]
    assert first["phone"] == "Not provided"
    assert first["lastLogin"] == "Never"
    assert first["status"] == "active"
    assert first["enrolledCourses"] == 0


async def test_blog_stats_on_empty_store(database):
    stats = await AdminService(database).get_blog_stats()

    assert stats["total"] == 0
    assert stats["draft"] == 0
