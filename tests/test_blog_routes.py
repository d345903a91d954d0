from datetime import datetime, timedelta

from httpx import AsyncClient


BLOGS = "/api/v1/blogs"


def new_blog(**overrides):
    data = {
        "title": "JEE mock test strategy",
        "content": "<p>Attempt the paper in three rounds.</p>",
        "excerpt": "Three rounds, one paper",
        "tags": ["jee", "strategy"],
        "featuredImage": "/uploads/jee.jpg",
        "published": True,
    }
    data.update(overrides)
    return data


async def create(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post(BLOGS, json=new_blog(**overrides), headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["blog"]


async def test_create_returns_camel_case_blog(client: AsyncClient, author, auth_headers):
    response = await client.post(BLOGS, json=new_blog(), headers=auth_headers(author))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    blog = body["blog"]
    assert blog["featuredImage"] == "/uploads/jee.jpg"
    assert blog["publishedAt"] is not None
    assert blog["likesCount"] == 0
    assert blog["commentsCount"] == 0
    assert blog["author"] == {"id": str(author.id), "name": author.name, "email": author.email}
    assert "featured_image" not in blog


async def test_create_without_token_is_unauthorized(client: AsyncClient, database):
    response = await client.post(BLOGS, json=new_blog())

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


async def test_create_with_bad_token_is_unauthorized(client: AsyncClient, database):
    response = await client.post(
        BLOGS, json=new_blog(), headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_create_missing_fields_is_bad_request(client: AsyncClient, author, auth_headers):
    response = await client.post(
        BLOGS, json={"title": "Only a title"}, headers=auth_headers(author)
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Title, content, and excerpt are required",
    }


async def test_malformed_body_uses_error_envelope(client: AsyncClient, author, auth_headers):
    response = await client.post(
        BLOGS, json=new_blog(tags="not-a-list"), headers=auth_headers(author)
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "tags" in body["error"]


async def test_list_is_public_and_omits_content(client: AsyncClient, author, auth_headers):
    await create(client, auth_headers(author))
    await create(client, auth_headers(author), title="Draft", published=False)

    response = await client.get(BLOGS)

    assert response.status_code == 200
    body = response.json()
    assert len(body["blogs"]) == 1
    assert "content" not in body["blogs"][0]
    assert body["pagination"] == {
        "page": 1,
        "pageSize": 10,
        "totalCount": 1,
        "total": 1,
        "totalPages": 1,
    }


async def test_list_clamps_bad_pagination(client: AsyncClient, author, auth_headers):
    await create(client, auth_headers(author))

    response = await client.get(BLOGS, params={"page": "abc", "limit": "1000"})

    assert response.status_code == 200
    pagination = response.json()["pagination"]
    assert pagination["page"] == 1
    assert pagination["pageSize"] == 100


async def test_list_filters_by_tag_and_search(client: AsyncClient, author, auth_headers):
    await create(client, auth_headers(author), title="NEET biology notes", tags=["neet"])
    await create(client, auth_headers(author), title="JEE physics notes", tags=["jee"])

    by_tag = await client.get(BLOGS, params={"tag": "neet"})
    by_search = await client.get(BLOGS, params={"search": "PHYSICS"})

    assert [b["title"] for b in by_tag.json()["blogs"]] == ["NEET biology notes"]
    assert [b["title"] for b in by_search.json()["blogs"]] == ["JEE physics notes"]


async def test_tags_endpoint(client: AsyncClient, author, auth_headers):
    await create(client, auth_headers(author), tags=["neet", "biology"])
    await create(client, auth_headers(author), tags=["hidden"], published=False)

    response = await client.get(f"{BLOGS}/tags")

    assert response.json() == {"success": True, "tags": ["biology", "neet"]}


async def test_mine_lists_own_drafts(client: AsyncClient, author, reader, auth_headers):
    await create(client, auth_headers(author), title="Mine")
    await create(client, auth_headers(author), title="My draft", published=False)
    await create(client, auth_headers(reader), title="Not mine")

    response = await client.get(f"{BLOGS}/mine", headers=auth_headers(author))

    assert response.status_code == 200
    titles = sorted(b["title"] for b in response.json()["blogs"])
    assert titles == ["Mine", "My draft"]


async def test_mine_requires_login(client: AsyncClient, database):
    response = await client.get(f"{BLOGS}/mine")

    assert response.status_code == 401


async def test_get_blog_increments_views(client: AsyncClient, author, auth_headers):
    blog = await create(client, auth_headers(author))

    await client.get(f"{BLOGS}/{blog['id']}")
    response = await client.get(f"{BLOGS}/{blog['id']}")

    assert response.status_code == 200
    assert response.json()["blog"]["views"] == 2
    assert response.json()["blog"]["content"] == "<p>Attempt the paper in three rounds.</p>"


async def test_get_draft_as_stranger_is_not_found(client: AsyncClient, author, reader, auth_headers):
    draft = await create(client, auth_headers(author), published=False)

    anonymous = await client.get(f"{BLOGS}/{draft['id']}")
    stranger = await client.get(f"{BLOGS}/{draft['id']}", headers=auth_headers(reader))
    owner = await client.get(f"{BLOGS}/{draft['id']}", headers=auth_headers(author))

    assert anonymous.status_code == 404
    assert anonymous.json() == {"success": False, "error": "Blog not found"}
    assert stranger.status_code == 404
    assert owner.status_code == 200


async def test_get_malformed_id_is_not_found(client: AsyncClient, database):
    response = await client.get(f"{BLOGS}/definitely-not-an-id")

    assert response.status_code == 404


async def test_update_partial(client: AsyncClient, author, auth_headers):
    blog = await create(client, auth_headers(author))

    response = await client.put(
        f"{BLOGS}/{blog['id']}",
        json={"title": "Updated title"},
        headers=auth_headers(author),
    )

    assert response.status_code == 200
    updated = response.json()["blog"]
    assert updated["title"] == "Updated title"
    assert updated["excerpt"] == blog["excerpt"]
    assert updated["tags"] == blog["tags"]
    assert updated["featuredImage"] == blog["featuredImage"]


async def test_update_by_other_user_is_forbidden(client: AsyncClient, author, reader, auth_headers):
    blog = await create(client, auth_headers(author))

    response = await client.put(
        f"{BLOGS}/{blog['id']}",
        json={"title": "Hijacked"},
        headers=auth_headers(reader),
    )

    assert response.status_code == 403
    assert response.json()["success"] is False


async def test_delete_flow(client: AsyncClient, author, reader, auth_headers):
    blog = await create(client, auth_headers(author))

    forbidden = await client.delete(f"{BLOGS}/{blog['id']}", headers=auth_headers(reader))
    anonymous = await client.delete(f"{BLOGS}/{blog['id']}")
    deleted = await client.delete(f"{BLOGS}/{blog['id']}", headers=auth_headers(author))
    gone = await client.get(f"{BLOGS}/{blog['id']}")

    assert forbidden.status_code == 403
    assert anonymous.status_code == 401
    assert deleted.json() == {"success": True, "message": "Blog deleted successfully"}
    assert gone.status_code == 404


async def test_like_toggle_route(client: AsyncClient, author, reader, auth_headers):
    blog = await create(client, auth_headers(author))
    url = f"{BLOGS}/{blog['id']}/like"

    first = await client.post(url, headers=auth_headers(reader))
    second = await client.post(url, headers=auth_headers(reader))
    anonymous = await client.post(url)

    assert first.json() == {"success": True, "liked": True, "likesCount": 1}
    assert second.json() == {"success": True, "liked": False, "likesCount": 0}
    assert anonymous.status_code == 401


async def test_comment_routes(client: AsyncClient, author, reader, auth_headers):
    blog = await create(client, auth_headers(author))
    url = f"{BLOGS}/{blog['id']}/comments"

    added = await client.post(url, json={"content": "Thanks!"}, headers=auth_headers(reader))
    empty = await client.post(url, json={"content": "  "}, headers=auth_headers(reader))
    anonymous = await client.post(url, json={"content": "Hi"})
    listed = await client.get(url)

    assert added.status_code == 200
    comment = added.json()["comment"]
    assert comment["content"] == "Thanks!"
    assert comment["author"]["name"] == reader.name
    assert "createdAt" in comment
    assert empty.status_code == 400
    assert anonymous.status_code == 401
    assert [c["id"] for c in listed.json()["comments"]] == [comment["id"]]

    refreshed = await client.get(f"{BLOGS}/{blog['id']}")
    assert refreshed.json()["blog"]["commentsCount"] == 1


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def test_timestamps_keep_their_zone_after_a_reload(client: AsyncClient, author, auth_headers):
    created = await create(client, auth_headers(author))

    response = await client.get(f"{BLOGS}/{created['id']}")
    fetched = response.json()["blog"]

    created_at = parse_timestamp(created["publishedAt"])
    fetched_at = parse_timestamp(fetched["publishedAt"])
    assert fetched_at.utcoffset() == timedelta(0)
    assert abs(fetched_at - created_at) < timedelta(milliseconds=1)


async def test_comment_text_round_trips(client: AsyncClient, author, reader, auth_headers):
    blog = await create(client, auth_headers(author))
    url = f"{BLOGS}/{blog['id']}/comments"

    await client.post(url, json={"content": "Q&A: is x < y?"}, headers=auth_headers(reader))
    listed = await client.get(url)

    assert listed.json()["comments"][0]["content"] == "Q&A: is x < y?"
