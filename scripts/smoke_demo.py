from __future__ import annotations

import argparse
import time

import httpx


def get_when_ready(client: httpx.Client, path: str, timeout: int) -> httpx.Response:
    """Poll ``path`` once a second until it answers 200 or ``timeout`` seconds pass."""
    give_up_at = time.monotonic() + timeout
    problem = "no response"
    while time.monotonic() < give_up_at:
        try:
            response = client.get(path)
        except httpx.TransportError as exc:
            problem = str(exc)
        else:
            if response.status_code == 200:
                return response
            problem = f"HTTP {response.status_code}"
        time.sleep(1)
    raise SystemExit(f"{path} not ready after {timeout}s: {problem}")


def check(condition: bool, failure: str) -> None:
    if not condition:
        raise SystemExit(failure)


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke test for the gallery preview app.")
    parser.add_argument("--base", default="http://localhost:8080")
    parser.add_argument("--gallery-slug", default="before-after")
    parser.add_argument("--timeout", type=int, default=60)
    args = parser.parse_args()

    with httpx.Client(base_url=args.base.rstrip("/"), timeout=10.0) as client:
        get_when_ready(client, f"/{args.gallery_slug.strip('/')}/", args.timeout)

        navigation = get_when_ready(client, "/api/navigation", args.timeout).json()
        categories = navigation.get("categories") or []
        check(bool(categories), "Navigation tree is empty")
        check(not navigation.get("is_fallback"), "Navigation fell back to the default category")
        links = [link for category in categories for link in category.get("links", [])]
        check(bool(links), "Navigation has no procedure links")

        slides = get_when_ready(client, "/api/carousel?limit=3", args.timeout).text
        check("gallery-carousel-item" in slides, "Carousel returned no slides")

        first_url = links[0]["url"]
        check(client.get(first_url).status_code == 200, f"Procedure page failed: {first_url}")

    print("Smoke test passed.")


if __name__ == "__main__":
    main()
