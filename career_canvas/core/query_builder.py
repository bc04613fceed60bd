"""
Turns untyped mentor-search query parameters into a FilterSpec and then into
SQLAlchemy WHERE/ORDER BY clauses, so filtering happens in the database.

Parsing fails open: a malformed value never rejects the request. It falls back
to the default for that parameter and the degradation is logged at WARNING.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import Select, or_, select

from ..constants import BusinessRules
from ..models import Mentor, MentorSkill

logger = logging.getLogger(__name__)

EXPERIENCE_BOUNDS = (BusinessRules.MIN_EXPERIENCE, BusinessRules.MAX_EXPERIENCE)
RATING_BOUNDS = (BusinessRules.MIN_RATING, BusinessRules.MAX_RATING)


@dataclass(frozen=True)
class NumericRange:
    min: float
    max: float

    def contains(self, value) -> bool:
        return value is not None and self.min <= value <= self.max


@dataclass(frozen=True)
class SortSpec:
    field: str = BusinessRules.DEFAULT_SORT_FIELD
    order: str = BusinessRules.DEFAULT_SORT_ORDER

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    @property
    def attribute(self) -> str:
        """Mentor column backing the public sort key."""
        return BusinessRules.SORTABLE_FIELDS[self.field]


@dataclass(frozen=True)
class FilterSpec:
    departments: Tuple[str, ...] = ()
    skills: Tuple[str, ...] = ()
    availability: Tuple[str, ...] = ()
    experience: NumericRange = NumericRange(*EXPERIENCE_BOUNDS)
    rating: NumericRange = NumericRange(*RATING_BOUNDS)
    search: str = ""
    sort: SortSpec = field(default_factory=SortSpec)
    user_email: Optional[str] = None

    def echo(self) -> Dict[str, Any]:
        """The applied filters, in the shape returned next to the listing."""
        return {
            "departments": list(self.departments),
            "skills": list(self.skills),
            "availability": list(self.availability),
            "experience": {"min": self.experience.min, "max": self.experience.max},
            "rating": {"min": self.rating.min, "max": self.rating.max},
            "search": self.search,
            "sortBy": self.sort.field,
            "sortOrder": self.sort.order,
        }


def _raw(params: Mapping[str, Any], name: str) -> Any:
    # Starlette's QueryParams keeps repeated keys; fold them into one comma list
    if hasattr(params, "getlist"):
        values = params.getlist(name)
        if len(values) > 1:
            return ",".join(values)
    return params.get(name)


def split_list(raw: Any) -> List[str]:
    """Splits a comma-separated value, stripping tokens and dropping empty ones."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        raw = ",".join(str(item) for item in raw)
    tokens = []
    for token in str(raw).split(","):
        token = token.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def _whole_years(raw: Any) -> int:
    # "4.5" means 4 years; fractions are truncated, not rejected
    return int(float(raw))


def _parse_number(raw: Any, default: float, cast: Callable, name: str):
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring unparseable {name}={raw!r}, using default {default}")
        return default
    if isinstance(value, float) and not math.isfinite(value):
        logger.warning(f"Ignoring non-finite {name}={raw!r}, using default {default}")
        return default
    return value


def _parse_range(raw_min: Any, raw_max: Any, bounds: Tuple, cast: Callable, name: str) -> NumericRange:
    low, high = bounds
    minimum = _parse_number(raw_min, low, cast, f"min{name}")
    maximum = _parse_number(raw_max, high, cast, f"max{name}")

    clamped_min = min(max(minimum, low), high)
    clamped_max = min(max(maximum, low), high)
    if (clamped_min, clamped_max) != (minimum, maximum):
        logger.warning(f"Clamped {name} range [{minimum}, {maximum}] to [{clamped_min}, {clamped_max}]")

    if clamped_min > clamped_max:
        logger.warning(f"Inverted {name} range [{clamped_min}, {clamped_max}], using defaults")
        return NumericRange(low, high)
    return NumericRange(clamped_min, clamped_max)


def parse_sort(sort_by: Any, sort_order: Any) -> SortSpec:
    field_name = str(sort_by).strip() if sort_by else BusinessRules.DEFAULT_SORT_FIELD
    if field_name not in BusinessRules.SORTABLE_FIELDS:
        logger.warning(f"Unknown sortBy={sort_by!r}, falling back to {BusinessRules.DEFAULT_SORT_FIELD}")
        field_name = BusinessRules.DEFAULT_SORT_FIELD

    order = str(sort_order).strip().lower() if sort_order else BusinessRules.DEFAULT_SORT_ORDER
    if order not in ("asc", "desc"):
        logger.warning(f"Unknown sortOrder={sort_order!r}, using desc")
        order = "desc"
    return SortSpec(field=field_name, order=order)


def parse_filter_params(params: Mapping[str, Any]) -> FilterSpec:
    """Builds a FilterSpec from raw query parameters. Never raises on bad input."""
    availability = []
    for token in split_list(_raw(params, "availability")):
        if token in BusinessRules.AVAILABILITY_STATES:
            availability.append(token)
        else:
            logger.warning(f"Discarding unknown availability {token!r}")

    user_email = params.get("userEmail")
    user_email = user_email.strip() if isinstance(user_email, str) and user_email.strip() else None

    search = params.get("search")
    search = str(search).strip() if search else ""

    return FilterSpec(
        departments=tuple(split_list(_raw(params, "departments"))),
        skills=tuple(split_list(_raw(params, "skills"))),
        availability=tuple(availability),
        experience=_parse_range(
            params.get("minExperience"), params.get("maxExperience"), EXPERIENCE_BOUNDS, _whole_years, "Experience"
        ),
        rating=_parse_range(
            params.get("minRating"), params.get("maxRating"), RATING_BOUNDS, float, "Rating"
        ),
        search=search,
        sort=parse_sort(params.get("sortBy"), params.get("sortOrder")),
        user_email=user_email,
    )


def build_filters(spec: FilterSpec) -> list:
    """WHERE clauses for the spec; the caller ANDs them together."""
    clauses = []
    if spec.departments:
        clauses.append(Mentor.department.in_(spec.departments))
    if spec.skills:
        # At least one declared skill must be in the requested set
        clauses.append(Mentor.skill_entries.any(MentorSkill.name.in_(spec.skills)))
    if spec.availability:
        clauses.append(Mentor.availability.in_(spec.availability))

    clauses.append(Mentor.experience.between(spec.experience.min, spec.experience.max))
    clauses.append(Mentor.rating.between(spec.rating.min, spec.rating.max))

    if spec.search:
        term = spec.search
        clauses.append(or_(
            Mentor.name.icontains(term, autoescape=True),
            Mentor.title.icontains(term, autoescape=True),
            Mentor.department.icontains(term, autoescape=True),
            Mentor.bio.icontains(term, autoescape=True),
            Mentor.skill_entries.any(MentorSkill.name.icontains(term, autoescape=True)),
        ))

    if spec.user_email:
        clauses.append(Mentor.email == spec.user_email)
    return clauses


def build_order_by(sort: SortSpec) -> list:
    column = getattr(Mentor, sort.attribute)
    primary = column.desc() if sort.descending else column.asc()
    # id keeps the order total when the sort field ties
    return [primary.nulls_last(), Mentor.id.asc()]


def build_query(spec: FilterSpec, limit: Optional[int] = None) -> Select:
    stmt = select(Mentor).where(*build_filters(spec)).order_by(*build_order_by(spec.sort))
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt
