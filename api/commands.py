"""
============================================================================
URL KEEP-ALIVE - COMMAND & QUERY SURFACE
============================================================================
Transport-independent handling of ``{url, action}`` commands and of the
read-all query. The HTTP server is a thin adapter over this module.
============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from config.constants import MessageTemplates, TargetAction
from database.models import Target
from monitoring.registry import TargetRegistry
from utils.logger import get_logger
from utils.validators import URLValidator


logger = get_logger("Commands")


def build_state_payload(targets: Sequence[Target]) -> Dict[str, Any]:
    """
    Shape a target snapshot as parallel mappings keyed by URL.

    Returns:
        ``{urls, active, counters, totalRequests, startTimes}``
    """
    return {
        "urls": [t.url for t in targets],
        "active": {t.url: bool(t.active) for t in targets},
        "counters": {t.url: t.request_count or 0 for t in targets},
        "totalRequests": {t.url: t.total_requests or 0 for t in targets},
        "startTimes": {t.url: t.start_time for t in targets},
    }


@dataclass
class CommandOutcome:
    """Acknowledgement of a successfully applied command."""
    message: str
    action: TargetAction
    target: Optional[Dict[str, Any]] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "action": self.action.value,
            "target": self.target,
            "data": self.data,
        }


class CommandHandler:
    """
    Applies commands to the registry.

    Raises the registry's and the validator's exceptions unchanged
    (``TargetNotFoundError``, ``CounterConflictError``, ``ValidationException``,
    ``DatabaseException``); mapping them onto a transport is the caller's
    job.
    """

    def __init__(self, registry: TargetRegistry):
        self.registry = registry

    async def query(self) -> Dict[str, Any]:
        """Read-all query used for display refreshes."""
        return build_state_payload(await self.registry.list_all())

    async def handle(self, url: Any, action: Optional[str] = None) -> CommandOutcome:
        """
        Apply one command.

        Args:
            url: Raw ``url`` field of the request
            action: Raw ``action`` field; omitted or unknown means
                "add if absent, then start"
        """
        url = URLValidator.validate(url)
        parsed = TargetAction.parse(action)
        logger.debug(f"Command {parsed.value} for {url}")

        target: Optional[Target]
        if parsed is TargetAction.ADD:
            target = await self.registry.add(url)
            message = MessageTemplates.ADDED
        elif parsed is TargetAction.START:
            target = await self.registry.start(url)
            message = MessageTemplates.STARTED
        elif parsed is TargetAction.STOP:
            target = await self.registry.stop(url)
            message = MessageTemplates.STOPPED
        elif parsed is TargetAction.DELETE:
            await self.registry.delete(url)
            target = None
            message = MessageTemplates.DELETED
        elif parsed is TargetAction.COUNTER:
            target = await self.registry.increment_success_counter(url)
            message = MessageTemplates.COUNTER_UPDATED
        else:
            target = await self.registry.ensure_started(url)
            message = MessageTemplates.ENSURE_STARTED

        return CommandOutcome(
            message=message.format(url=url),
            action=parsed,
            target=target.to_dict() if target is not None else None,
            data=await self.query(),
        )
