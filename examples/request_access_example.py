#!/usr/bin/env python3
"""
Example demonstrating the access request flow against a running relay.

Submits a request, then shows what the accept and deny links return.
"""

import asyncio

import httpx

BASE_URL = "http://localhost:3001"


async def submit_request() -> None:
    """Submit an access request."""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{BASE_URL}/submit-request",
            json={
                "githubUsername": "octocat",
                "reason": "Reviewing the release branch",
                "repoName": "private-repo",
                "requesterName": "Mona",
            },
        )
        if response.status_code == 400:
            for error in response.json().get("errors", []):
                print(f"❌ {error['field']}: {error['message']}")
            return
        print(f"📨 {response.status_code}: {response.json()['message']}")


async def follow_link(path: str, params: dict[str, str]) -> None:
    """Call an accept or deny link the way a mail client would."""
    async with httpx.AsyncClient(timeout=60.0) as client:
        response = await client.get(f"{BASE_URL}{path}", params=params)
        print(f"🔗 {path} -> {response.status_code}: {response.text}")


async def main():
    await submit_request()
    await follow_link("/deny-request", {"username": "octocat"})
    # Uncomment to actually add the collaborator
    # await follow_link("/accept-request", {"repo": "private-repo", "username": "octocat"})


if __name__ == "__main__":
    asyncio.run(main())
