"""AI structuring route handlers."""

from fastapi import APIRouter

from sufra.api.v1.schemas.request.admin_request import (
    AiBulkTagRequest,
    AiStructureRequest,
)
from sufra.api.v1.schemas.response.ai_response import (
    BulkTagResponse,
    ModelListResponse,
)
from sufra.deps.auth import AdminActor, ModeratorActor
from sufra.deps.services import AiService

router = APIRouter(prefix="/v1/ai", tags=["ai"])


@router.post(
    "/structure",
    summary="Structure pasted ingredients and steps",
    description=(
        "Returns ingredientGroups, stepGroups and tags (from the existing tag list) "
        "ready to submit as a recipe."
    ),
)
def structure_recipe(
    body: AiStructureRequest, service: AiService, actor: ModeratorActor
) -> dict:
    return service.structure(body.ingredients, body.steps, body.locale)


@router.post("/bulk-tag", summary="Retag recipes with the AI model")
def bulk_tag(
    body: AiBulkTagRequest, service: AiService, actor: AdminActor
) -> BulkTagResponse:
    return BulkTagResponse.model_validate(service.bulk_tag(body.recipe_ids, actor))


@router.get("/models", summary="Models that can generate content")
def list_models(service: AiService, actor: AdminActor) -> ModelListResponse:
    return ModelListResponse(models=service.list_models())
