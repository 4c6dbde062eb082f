# File: src/common/base_service/base_service.py
from abc import ABC
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List

from common.exceptions.base_exception import StorageUnavailableException
from common.exceptions.error_handlers import handle_general_error, handle_storage_error
from common.logging.logger import log_info


@dataclass(frozen=True)
class SideEffect:
    """A named follow-up action run after the authoritative write."""

    name: str
    action: Callable[[], Awaitable[Any]]


@dataclass
class SideEffectOutcome:
    name: str
    succeeded: bool
    result: Any = None
    error: str = None


class BaseService(ABC):
    async def run_side_effects(self, effects: List[SideEffect], context: Dict[str, Any]) -> Dict[str, SideEffectOutcome]:
        """
        Run best-effort effects in order, each isolated from the others.

        A failing effect is logged and reported to Sentry; it never raises and never
        stops the effects after it.
        """
        outcomes = {}
        for effect in effects:
            effect_context = {**context, "action": effect.name}
            try:
                result = await effect.action()
                outcomes[effect.name] = SideEffectOutcome(effect.name, True, result=result)
                log_info(f"{effect.name} completed", extra=effect_context)
            except StorageUnavailableException as db_exc:
                handle_storage_error(db_exc, effect_context)
                outcomes[effect.name] = SideEffectOutcome(effect.name, False, error=str(db_exc.detail))
            except Exception as e:
                handle_general_error(e, effect_context)
                outcomes[effect.name] = SideEffectOutcome(effect.name, False, error=str(e))
        return outcomes
