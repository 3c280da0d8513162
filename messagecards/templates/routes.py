from __future__ import annotations

from typing import List

from fastapi import APIRouter

from messagecards.common.error_envelope import error_response
from messagecards.templates.catalog import CardTemplate, get_template_by_id, list_templates

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[CardTemplate])
def get_templates():
    return list_templates()


@router.get("/{template_id}", response_model=CardTemplate)
def get_template(template_id: str):
    template = get_template_by_id(template_id)
    if template is None:
        error_response(
            code="templates.not_found",
            message="Template not found",
            status_code=404,
            resource_kind="template",
            details={"template_id": template_id},
        )
    return template
