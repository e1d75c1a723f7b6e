"""Turn update endpoint."""

from fastapi import APIRouter

from gist.api.dependencies import ConversationStoreDep, UserContextDep
from gist.api.exceptions import TurnConflictAPIError, TurnNotFoundAPIError
from gist.conversation.models import Turn, TurnPatch
from gist.conversation.store import TurnConflictError, TurnNotFoundError
from gist.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/turns")


@router.patch("/{turn_id}", response_model=Turn, response_model_by_alias=True)
async def patch_turn(
    turn_id: str,
    patch: TurnPatch,
    user: UserContextDep,
    store: ConversationStoreDep,
) -> Turn:
    """Merge ``content`` and/or ``status`` into a turn and return it."""
    try:
        turn = await store.patch_turn(turn_id, patch, user.user_id)
    except TurnNotFoundError as e:
        raise TurnNotFoundAPIError(str(e)) from e
    except TurnConflictError as e:
        raise TurnConflictAPIError(str(e)) from e
    logger.debug("turn_patched", turn_id=turn_id, fields=sorted(patch.changes()))
    return turn
