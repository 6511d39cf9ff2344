# --- rlayout_lib/schema.py ---
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class Point:
    """A page-space point (origin bottom-left)."""

    x: float
    y: float


@dataclass
class BoundingBox:
    """Region bounds. `y` is the first token's baseline in page space."""

    x: float
    y: float
    width: float
    height: float
    left: float
    right: float
    top: float
    bottom: float
    screenTop: float = 0.0
    screenBottom: float = 0.0


@dataclass
class RegionFont:
    name: str
    size: float
    weight: str = "normal"
    style: str = "normal"


@dataclass
class Region:
    """A merged group of tokens representing one logical text element."""

    index: int
    text: str
    bbox: BoundingBox
    font: RegionFont
    color: str
    isBullet: bool = False
    bulletChar: Optional[str] = None
    isBold: bool = False
    isItalic: bool = False
    alignment: str = "left"
    spacingFromPrevious: Optional[float] = None
    pageNumber: int = 1


@dataclass
class FontDescriptor:
    """One entry per distinct raw font identifier."""

    rawId: str
    cleanedName: str
    size: float
    weight: str
    style: str
    mappedFamily: str


@dataclass
class PathElement:
    points: List[Point]
    strokeColor: str
    lineWidth: float
    type: str = "path"


@dataclass
class FillElement:
    points: List[Point]
    fillColor: str
    type: str = "fill"


@dataclass
class RectangleElement:
    x: float
    y: float
    width: float
    height: float
    strokeColor: str
    fillColor: str
    lineWidth: float
    type: str = "rectangle"


GraphicElement = Union[PathElement, FillElement, RectangleElement]


@dataclass
class SectionStructure:
    sectionsOrder: List[str] = field(default_factory=list)
    sectionNames: Dict[str, str] = field(default_factory=dict)
    detectionMethod: str = "default"


@dataclass
class EntryFormat:
    """Field ordering and layout conventions of one section's entries."""

    fieldOrder: List[str]
    datesOnRight: bool = False
    hasBullets: bool = False
    bulletChar: str = "•"
    titleWithSecondaryOnSameLine: bool = False
    locationAfterInstitution: bool = False
    gpaSeparateLine: bool = False
    bulletIndentation: float = 0.0


@dataclass
class ColorPalette:
    primary: Optional[str] = None
    text: Optional[str] = None
    muted: Optional[str] = None


@dataclass
class MappedRegion:
    region: Region
    isHeader: bool
    sectionType: str


@dataclass
class PageLayout:
    pageNumber: int
    width: float
    height: float
    textRegions: List[Region] = field(default_factory=list)
    graphics: List[GraphicElement] = field(default_factory=list)


@dataclass
class LayoutDocument:
    """The complete structural model of one analyzed resume."""

    pages: List[PageLayout]
    fonts: List[FontDescriptor]
    sectionStructure: SectionStructure
    entryFormats: Dict[str, EntryFormat]
    colorPalette: ColorPalette
    sectionMap: Dict[str, List[MappedRegion]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def regions(self) -> List[Region]:
        """All text regions in document reading order."""
        return [r for page in self.pages for r in page.textRegions]


@dataclass
class FontSuggestions:
    heading: str
    body: str
    sizes: Dict[str, str] = field(default_factory=dict)


@dataclass
class LayoutHints:
    headerAlignment: str = "center"
    sectionSpacing: int = 24
    textAlignment: str = "left"
    hasBorder: bool = False
    headerStyle: str = "underline"
    lineHeight: float = 1.5
    paragraphSpacing: int = 8


@dataclass
class StyleSuggestions:
    """Lightweight style preview derived from a LayoutDocument."""

    colors: ColorPalette
    fonts: FontSuggestions
    type: str
    structure: SectionStructure
    layout: LayoutHints

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _region_from_dict(data: Dict) -> Region:
    data = dict(data)
    data["bbox"] = BoundingBox(**data["bbox"])
    data["font"] = RegionFont(**data["font"])
    return Region(**data)


def _graphic_from_dict(data: Dict) -> Optional[GraphicElement]:
    data = dict(data)
    g_type = data.pop("type", None)
    if g_type in ("path", "fill"):
        data["points"] = [Point(**p) for p in data.get("points", [])]
    if g_type == "path":
        return PathElement(**data)
    if g_type == "fill":
        return FillElement(**data)
    if g_type == "rectangle":
        return RectangleElement(**data)
    return None


def from_dict(data: Dict[str, Any]) -> LayoutDocument:
    """Rebuilds a LayoutDocument from the output of `to_dict`."""
    pages = []
    for page_data in data.get("pages", []):
        graphics = [_graphic_from_dict(g) for g in page_data.get("graphics", [])]
        pages.append(
            PageLayout(
                pageNumber=page_data["pageNumber"],
                width=page_data["width"],
                height=page_data["height"],
                textRegions=[_region_from_dict(r) for r in page_data.get("textRegions", [])],
                graphics=[g for g in graphics if g is not None],
            )
        )
    section_map = {
        bucket: [
            MappedRegion(
                region=_region_from_dict(m["region"]),
                isHeader=m["isHeader"],
                sectionType=m["sectionType"],
            )
            for m in mapped
        ]
        for bucket, mapped in data.get("sectionMap", {}).items()
    }
    return LayoutDocument(
        pages=pages,
        fonts=[FontDescriptor(**f) for f in data.get("fonts", [])],
        sectionStructure=SectionStructure(**data["sectionStructure"]),
        entryFormats={k: EntryFormat(**v) for k, v in data.get("entryFormats", {}).items()},
        colorPalette=ColorPalette(**data.get("colorPalette", {})),
        sectionMap=section_map,
    )


def save_json(document: LayoutDocument, output_path: str) -> None:
    """
    Serializes a LayoutDocument to a JSON file.

    Args:
        document: The LayoutDocument to serialize.
        output_path: The path to the output .json file.
    """
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)


def load_json(input_path: str) -> LayoutDocument:
    """
    Deserializes a JSON file written by `save_json`.

    Args:
        input_path: The path to the input .json file.

    Returns:
        The reconstructed LayoutDocument.
    """
    with open(input_path, "r", encoding="utf-8") as f:
        return from_dict(json.load(f))
