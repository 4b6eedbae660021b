from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from adapters.api.gallery_client import GalleryApiError, HttpGalleryClient
from adapters.api.http_client import DEFAULT_BASE_URL, create_http_client
from adapters.filesystem.gallery_source import CASES_DIR, SIDEBAR_FILE
from adapters.filesystem.json_utils import write_json_atomic


def case_file_name(payload: dict[str, Any]) -> str | None:
    case_id = str(payload.get("id") or "").strip()
    return f"{case_id}.json" if case_id else None


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export sidebar and carousel cases from the gallery API into a data directory."
    )
    parser.add_argument("--token", required=True)
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--website-property-id", type=int, action="append", default=[])
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument("--output", default="data/gallery")
    args = parser.parse_args()

    output = Path(args.output)
    client = HttpGalleryClient(
        create_http_client(base_url=args.base_url), args.website_property_id
    )
    try:
        sidebar = client.fetch_sidebar(args.token)
        records = client.fetch_carousel(args.token, limit=args.limit)
    except GalleryApiError as exc:
        raise SystemExit(f"Export failed: {exc}") from exc
    finally:
        client.close()

    write_json_atomic(output / SIDEBAR_FILE, sidebar)
    print(f"Wrote {output / SIDEBAR_FILE}")

    for record in records:
        name = case_file_name(dict(record))
        if name is None:
            print("Skipped case without id")
            continue
        target = output / CASES_DIR / name
        write_json_atomic(target, record)
        print(f"Wrote {target}")


if __name__ == "__main__":
    main()
