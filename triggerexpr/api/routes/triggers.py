"""Trigger expression API routes."""

from fastapi import APIRouter

from triggerexpr.api.deps import ParserDep
from triggerexpr.core.errors import SemanticError
from triggerexpr.schemas.common import APIResponse
from triggerexpr.schemas.trigger import ParseError, ParseRequest, ParseResponse

router = APIRouter(prefix="/triggers", tags=["triggers"])


@router.post("/parse", response_model=APIResponse[ParseResponse])
async def parse_expression(
    data: ParseRequest,
    parser: ParserDep,
) -> APIResponse[ParseResponse]:
    """Parse a trigger expression against the registry.

    Invalid expressions are not an HTTP error: the response reports
    ``valid=false`` with the reason.
    """
    result = parser.parse(data.expression, data.trigger_name)

    error = None
    if result.error is not None:
        error = ParseError(
            kind="semantic" if isinstance(result.error, SemanticError) else "grammar",
            reason=result.error.reason,
            message=str(result.error),
        )

    return APIResponse(
        data=ParseResponse(
            expression=data.expression,
            valid=result.ok,
            triggers=result.triggers,
            error=error,
        )
    )
