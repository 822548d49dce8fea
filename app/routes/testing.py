"""
Roster Backend — Test Support Routes
======================================

What:  DELETE /__test__/reset wipes the roster and restarts ids at 1.
Who:   External black-box suites that talk to a running server and need a
       known starting state between cases.
When:  Mounted by create_app() only when settings.expose_test_routes is true.

Not part of the public contract; excluded from the OpenAPI schema.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from app.dependencies import get_registry
from app.services.student_registry import StudentRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/__test__", tags=["Test Support"], include_in_schema=False)


@router.delete(
    "/reset",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def reset_registry(
    request: Request,
    registry: StudentRegistry = Depends(get_registry),
) -> Response:
    dropped = len(registry)
    registry.reset()
    logger.info(
        "Roster reset via test route by %s (%d students dropped)",
        request.client.host if request.client else "unknown",
        dropped,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
