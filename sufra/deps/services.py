"""Service providers for routes that tests need to swap out."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from sufra.deps.db import get_db
from sufra.services.ai_structuring_service import AiStructuringService


def get_ai_structuring_service(
    db: Annotated[Session, Depends(get_db)],
) -> AiStructuringService:
    return AiStructuringService(db)


AiService = Annotated[AiStructuringService, Depends(get_ai_structuring_service)]
