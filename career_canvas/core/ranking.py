import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..constants import BusinessRules
from .query_builder import SortSpec

logger = logging.getLogger(__name__)

RELEVANCE_KEY = "relevanceScore"


def relevance_score(mentor: Mapping[str, Any], interests: Optional[Iterable[str]]) -> int:
    """Number of the mentor's interest tags that the requester shares. Missing lists count as empty."""
    mentor_interests = set(mentor.get("interests") or [])
    return len(mentor_interests & set(interests or []))


@dataclass(frozen=True)
class SortStage:
    """
    One stable sort over a record key. Records without a value for the key
    always go last, whatever the direction.
    """
    key: str
    descending: bool = False

    def apply(self, records: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        present = [r for r in records if r.get(self.key) is not None]
        missing = [r for r in records if r.get(self.key) is None]
        # list.sort stays stable with reverse=True
        present.sort(key=lambda r: r[self.key], reverse=self.descending)
        return present + missing


class RankingPipeline:
    """
    Composes sort stages into one ordering. Stages run least significant first,
    so the last stage decides the primary order and earlier ones break its ties.
    """

    def __init__(self, stages: Sequence[SortStage]):
        self.stages = list(stages)

    def then(self, *stages: SortStage) -> "RankingPipeline":
        """Returns a new pipeline whose added stages take precedence over the current ones."""
        return RankingPipeline(self.stages + list(stages))

    def run(self, records: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        result = list(records)
        for stage in self.stages:
            result = stage.apply(result)
        return result


def sort_stages(sort: SortSpec) -> List[SortStage]:
    """The in-memory equivalent of the Query Builder's ORDER BY (field, then id)."""
    return [SortStage("id"), SortStage(sort.field, descending=sort.descending)]


def primary_sort_pipeline(sort: SortSpec) -> RankingPipeline:
    return RankingPipeline(sort_stages(sort))


RELEVANCE_PIPELINE = RankingPipeline([
    SortStage("rating", descending=True),
    SortStage(RELEVANCE_KEY, descending=True),
])


def score(mentors: Iterable[Mapping[str, Any]], requester_interests: Optional[Iterable[str]]) -> List[Dict[str, Any]]:
    """Copies each record and attaches its relevance score."""
    interests = list(requester_interests or [])
    scored = []
    for mentor in mentors:
        record = dict(mentor)
        record[RELEVANCE_KEY] = relevance_score(mentor, interests)
        scored.append(record)
    return scored


def rank(mentors: Iterable[Mapping[str, Any]], requester_interests: Optional[Iterable[str]]) -> List[Dict[str, Any]]:
    """
    Orders mentors by relevance score descending, then rating descending.

    The input is left untouched; every returned record is a copy carrying
    ``relevanceScore``. Applying ``rank`` to its own output returns the same order.
    """
    ranked = RELEVANCE_PIPELINE.run(score(mentors, requester_interests))
    logger.debug(f"Ranked {len(ranked)} mentors.")
    return ranked


def resolve_requester_interests(preferences: Optional[Any]) -> List[str]:
    """
    Interests used for ranking, taken from saved mentorship preferences:
    the top-level interests, else the nested interests, else the nested goals,
    else the starter set.
    """
    if preferences is not None:
        nested = getattr(preferences, "preferences", None) or {}
        for candidate in (
            getattr(preferences, "interests", None),
            nested.get("interests"),
            nested.get("goals"),
        ):
            if candidate:
                return list(candidate)
    return list(BusinessRules.DEFAULT_INTERESTS)
