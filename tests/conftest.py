"""Shared fixtures: a small blog with nested categories."""

import json

import pytest


def rich_text(word_count: int, word: str = "word") -> dict:
    """Build a rich-text document containing ``word_count`` words."""
    return {
        "root": {
            "type": "root",
            "children": [
                {
                    "type": "paragraph",
                    "children": [{"type": "text", "text": " ".join([word] * word_count)}],
                }
            ],
        }
    }


@pytest.fixture
def category_records():
    return [
        {
            "id": "c-web",
            "title": "Web",
            "slug": "web",
            "description": "Web exploitation write-ups",
            "icon": "bug",
            "badge": "BSCP",
            "featured": True,
            "sortOrder": 2,
        },
        {
            "id": "c-b2r",
            "title": "Boot2Root",
            "slug": "boot2root",
            "icon": "terminal",
            "badge": "HTB",
            "featured": True,
            "sortOrder": 1,
        },
        {
            "id": "c-ad",
            "title": "Active Directory",
            "slug": "active-directory",
            "icon": "network",
            "badge": "AD",
            "parent": "c-b2r",
            "breadcrumbs": [
                {"label": "Boot2Root", "url": "/boot2root"},
                {"label": "Active Directory", "url": "/boot2root/active-directory"},
            ],
        },
        {
            "id": "c-kerb",
            "title": "Kerberos",
            "slug": "kerberos",
            "parent": {"id": "c-b2r", "title": "Boot2Root"},
        },
        {
            "id": "c-empty",
            "title": "Empty",
            "slug": "empty",
        },
    ]


@pytest.fixture
def post_records():
    return [
        {
            "id": "p1",
            "title": "HTB: Lame",
            "slug": "htb-lame",
            "categories": ["c-b2r"],
            "content": rich_text(400),
            "publishedAt": "2024-01-01T00:00:00.000Z",
            "createdAt": "2023-12-30T00:00:00.000Z",
            "_status": "published",
        },
        {
            "id": "p2",
            "title": "SQL Injection Basics",
            "slug": "sqli-basics",
            "categories": [{"id": "c-web", "title": "Web"}, "c-b2r"],
            "meta": {"description": "Union-based injection walkthrough"},
            "content": rich_text(100),
            "publishedAt": "2023-06-01T00:00:00.000Z",
            "_status": "published",
        },
        {
            "id": "p3",
            "title": "Kerberoasting",
            "slug": "kerberoasting",
            "categories": ["c-ad", "c-kerb", "c-missing"],
            "_status": "published",
        },
    ]


@pytest.fixture
def draft_record():
    return {
        "id": "p4",
        "title": "Draft: XSS filters",
        "slug": "xss-filters",
        "categories": ["c-web"],
        "content": rich_text(900),
        "publishedAt": "2025-01-01T00:00:00.000Z",
        "_status": "draft",
    }


@pytest.fixture
def content_file(tmp_path, post_records, category_records, draft_record):
    """JSON export with every fixture record, including one draft."""
    path = tmp_path / "content.json"
    path.write_text(
        json.dumps({"posts": post_records + [draft_record], "categories": category_records}),
        encoding="utf-8",
    )
    return path
