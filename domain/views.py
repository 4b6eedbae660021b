from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from domain.catalog import ImageDisplayMode
from domain.messages import Message
from domain.models import Photo

Text = str | Message

CardKind = Literal["procedures", "patient", "details", "list", "notes"]


@dataclass(frozen=True)
class NavLink:
    label: str
    url: str
    category_slug: str
    procedure_slug: str
    procedure_ids: str
    procedure_count: int
    has_nudity: bool
    count_badge: int | None = None


@dataclass(frozen=True)
class NavCategory:
    slug: str
    label: Text
    total_cases: int
    expanded: bool
    show_count: bool
    aria_label: Message
    links: tuple[NavLink, ...] = ()
    placeholder: Message | None = None


@dataclass(frozen=True)
class NavTree:
    categories: tuple[NavCategory, ...]
    is_fallback: bool = False


@dataclass(frozen=True)
class SlideView:
    id: str
    index: int
    aria_label: Message
    photo: Photo
    alt_text: Text
    case_id: str
    procedure_slug: str
    procedure_ids: str
    case_url: str
    link_label: Message
    show_actions: bool
    has_nudity: bool


@dataclass(frozen=True)
class PlaceholderSlide:
    index: int
    procedure_slug: str


@dataclass(frozen=True)
class NavButton:
    url: str
    label: Message


@dataclass(frozen=True)
class CaseHeader:
    headline: str
    procedure_name: str
    case_label: str
    back_link: NavButton
    previous: NavButton | None = None
    next: NavButton | None = None


@dataclass(frozen=True)
class MainImage:
    url: str
    alt_text: str


@dataclass(frozen=True)
class Thumbnail:
    index: int
    url: str
    alt_text: str
    active: bool = False


@dataclass(frozen=True)
class ImageSection:
    main: MainImage | None = None
    thumbnails: tuple[Thumbnail, ...] = ()
    placeholder: Message | None = None


@dataclass(frozen=True)
class AttributeRow:
    label: Text
    value: Text


@dataclass(frozen=True)
class Card:
    kind: CardKind
    title: Text
    badges: tuple[str, ...] = ()
    rows: tuple[AttributeRow, ...] = ()
    items: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()


@dataclass(frozen=True)
class SeoView:
    title: str
    description: str


@dataclass(frozen=True)
class CaseDetailView:
    case_id: str
    procedure_name: str
    procedure_slug: str
    has_nudity: bool
    header: CaseHeader
    images: ImageSection
    cards: tuple[Card, ...]
    seo: SeoView
    show_favorite: bool = True
    show_share: bool = False


@dataclass(frozen=True)
class CardContext:
    title: Text
    main_image_url: str = ""
    procedure_slug: str = ""


@dataclass(frozen=True)
class CaseCardView:
    case_id: str
    image_url: str
    procedure_title: Text
    display_mode: ImageDisplayMode = "single"
    procedure_id: str = ""
    procedure_slug: str = ""
    case_url: str = ""
    before_url: str = ""
    after_url: str = ""
    has_nudity: bool = False
    show_favorite: bool = False
    show_share: bool = False
    data_attributes: dict[str, str] = field(default_factory=dict)
    minimal: bool = False

    @classmethod
    def fallback(cls, case_id: str, main_image_url: str, procedure_title: Text) -> CaseCardView:
        return cls(
            case_id=case_id,
            image_url=main_image_url,
            procedure_title=procedure_title,
            minimal=True,
        )


@dataclass(frozen=True)
class FavoritesView:
    count: int
    columns: int
    cards: tuple[CaseCardView, ...]
    count_label: Message
    placeholder: Message | None = None

    @property
    def is_empty(self) -> bool:
        return not self.cards
