from typing import List

from ..core import RuleContext, audit_rule
from ..models import Node
from ...model import Severity, Violation


def _has_captions(ctx: RuleContext, media: Node) -> bool:
    return any(
        (track.get("kind") or "").strip().lower() == "captions"
        for track in ctx.document.descendants(media, ["track"])
    )


@audit_rule(
    "media-alternatives",
    Severity.CRITICAL,
    "Audio and video elements are missing captions or a text description."
)
def check_media_alternatives(ctx: RuleContext) -> List[Violation]:
    """Needs a <track kind="captions"> child or an aria-describedby reference."""
    missing = [
        media for media in ctx.document.find_all(("audio", "video"))
        if not _has_captions(ctx, media) and not media.has_nonempty_attr("aria-describedby")
    ]
    return ctx.violation(check_media_alternatives, missing, "Media has no captions track or description")


RULES = [check_media_alternatives]
