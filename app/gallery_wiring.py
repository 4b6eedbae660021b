from __future__ import annotations

import httpx

from adapters.api.gallery_client import HttpGalleryClient
from adapters.filesystem.gallery_source import FileSystemGallerySource
from app.config import AppSettings
from domain.ports.gallery import SidebarSource
from domain.services.sidebar_index import SidebarIndexProvider


def build_gallery_source(
    settings: AppSettings,
    transport: httpx.BaseTransport | None = None,
) -> HttpGalleryClient | FileSystemGallerySource:
    gallery = settings.gallery
    if gallery.source == "filesystem":
        if not gallery.data_dir.is_dir():
            msg = f"gallery.data_dir does not exist: {gallery.data_dir}"
            raise ValueError(msg)
        return FileSystemGallerySource(gallery.data_dir)
    if not gallery.api.tokens:
        msg = "gallery.api.tokens is required when source is api"
        raise ValueError(msg)
    return HttpGalleryClient.from_settings(gallery.api, transport=transport)


def build_sidebar_provider(
    settings: AppSettings,
    source: SidebarSource,
) -> SidebarIndexProvider:
    return SidebarIndexProvider(
        source,
        canonical_terminology=settings.gallery.canonical_terminology,
    )
