from fastapi import APIRouter

from recipe_steps.src.api.steps.routes_steps import router as steps_router
from recipe_steps.src.constants import HEALTH_STATUS_OK

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": HEALTH_STATUS_OK}


router.include_router(steps_router)
