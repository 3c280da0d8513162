"""Static catalog of card templates (read-only)."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TemplatePattern(str, Enum):
    simple = "simple"
    elegant = "elegant"
    modern = "modern"


class CardTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    name: str
    description: str
    background_color: str
    text_color: str
    accent_color: str
    pattern: Optional[TemplatePattern] = None


TEMPLATES: List[CardTemplate] = [
    CardTemplate(
        id="template1",
        name="シンプル",
        description="白を基調とした清潔感のあるデザイン",
        background_color="#FFFFFF",
        text_color="#2C2C2C",
        accent_color="#D4A373",
        pattern=TemplatePattern.simple,
    ),
    CardTemplate(
        id="template2",
        name="エレガント",
        description="淡いピンクと花モチーフの優雅なデザイン",
        background_color="#FFF5F7",
        text_color="#4A3C3C",
        accent_color="#E8B4BC",
        pattern=TemplatePattern.elegant,
    ),
    CardTemplate(
        id="template3",
        name="モダン",
        description="グレーと幾何学模様の洗練されたデザイン",
        background_color="#F5F5F5",
        text_color="#1A1A1A",
        accent_color="#8B8B8B",
        pattern=TemplatePattern.modern,
    ),
]

_BY_ID: Dict[str, CardTemplate] = {t.id: t for t in TEMPLATES}


def list_templates() -> List[CardTemplate]:
    return list(TEMPLATES)


def get_template_by_id(template_id: str) -> Optional[CardTemplate]:
    return _BY_ID.get(template_id)
