"""
Prompt Builder Layer
====================

Assembles the generation prompt for one request and derives the structural
constraints the prompt announces.

Responsibilities:
- Maps availableDays to a time bucket (category count, items per category,
  total-item ceiling) for roadmaps
- Maps availableDays to an activities-per-day pace for trails
- Derives a time-distribution clause for key results from completion_date
- Embeds the subject verbatim in a template mandating bare JSON output

Invariants:
- Pure: no I/O. The only clock read is "today" for key results, and it can
  be injected.
- Roadmap day buckets: d < 14, 14 <= d <= 30, 30 < d <= 60, d > 60.
- Every emitted range has 1 <= low < high.
- The ceiling stated in a roadmap prompt is a hint only; enforcement is the
  validator's job (with its own slack margin).
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple, Union

from ..schemas import ArtifactKind, GenerationRequest

Range = Tuple[int, int]

# ── Roadmap time buckets ─────────────────────────────────────────────────────
_DEFAULT_CATEGORIES: Range = (4, 6)
_DEFAULT_ITEMS_PER_CATEGORY: Range = (5, 10)
_DEFAULT_ITEM_CEILING: int = 30

# (max_days inclusive, categories, items per category, advice)
_ROADMAP_BUCKETS = (
    (13, (3, 4), (3, 5), "Prioritize only what is ESSENTIAL and most important."),
    (30, (4, 6), (5, 8), "Keep a balanced and practical structure."),
    (60, (5, 7), (6, 10), "There is enough time for a more complete structure."),
)
_LONG_HORIZON_ADVICE = "The number of items must be proportional to the available time."
_LONG_HORIZON_BASE_DAYS = 60
_LONG_HORIZON_BASE_CATEGORIES = 6
_LONG_HORIZON_DAYS_PER_CATEGORY = 15

# ── Trail pacing ─────────────────────────────────────────────────────────────
_DEFAULT_TRAIL_DAYS: int = 12
_DEFAULT_ACTIVITIES_PER_DAY: Range = (2, 3)
TRAIL_ACTIVITY_TYPES = ("read_chapters", "watch_video", "read_article", "take_course", "do_project")

# ── Key results horizon ──────────────────────────────────────────────────────
_DAYS_PER_MONTH = 30
_SHORT_TERM_MONTHS = 3
_MID_TERM_MONTHS = 6


@dataclass(frozen=True)
class PromptContext:
    """Structural constraints derived from a request, computed once."""

    kind: ArtifactKind
    time_clause: str = ""
    category_range: Optional[Range] = None
    items_per_category_range: Optional[Range] = None
    item_ceiling: Optional[int] = None
    available_days: Optional[int] = None
    total_days: Optional[int] = None
    activities_per_day: Optional[Range] = None
    count: Optional[int] = None


def _fmt(r: Range) -> str:
    return f"{r[0]}-{r[1]}"


def _clamp_range(low: int, high: int) -> Range:
    low = max(1, low)
    return low, max(low + 1, high)


def roadmap_constraints(available_days: Optional[int]) -> Tuple[Range, Range, int]:
    """
    Category range, items-per-category range and total-item ceiling.

    Args:
        available_days: Days available to complete the roadmap (None or <= 0
                        means no time constraint)

    Returns:
        (categories, items_per_category, item_ceiling)
    """
    if available_days is None or available_days <= 0:
        return _DEFAULT_CATEGORIES, _DEFAULT_ITEMS_PER_CATEGORY, _DEFAULT_ITEM_CEILING

    for max_days, categories, items, _ in _ROADMAP_BUCKETS:
        if available_days <= max_days:
            return categories, items, available_days

    # Long horizon: roughly one extra category per 15 days past 60
    estimated_categories = (
        _LONG_HORIZON_BASE_CATEGORIES
        + (available_days - _LONG_HORIZON_BASE_DAYS) // _LONG_HORIZON_DAYS_PER_CATEGORY
    )
    items_per_category = available_days // estimated_categories
    categories = _clamp_range(estimated_categories - 1, estimated_categories + 2)
    items = _clamp_range(items_per_category - 2, items_per_category + 3)
    return categories, items, available_days


def trail_activities_per_day(available_days: Optional[int]) -> Range:
    if available_days is None or available_days <= 0:
        return _DEFAULT_ACTIVITIES_PER_DAY
    if available_days < 7:
        return 1, 2
    if available_days <= 14:
        return 2, 3
    return 3, 4


def _parse_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def key_results_time_clause(
    completion_date: Union[date, str, None],
    today: Optional[date] = None,
) -> str:
    """
    Describe how key results should be spread until completion_date.

    Distance is measured in calendar days from today; months are 30-day
    blocks. An unparseable date yields an empty clause.
    """
    target = _parse_date(completion_date)
    if target is None:
        return ""

    today = today or date.today()
    days_remaining = (target - today).days
    months_remaining = days_remaining // _DAYS_PER_MONTH

    if days_remaining < 0:
        return (
            f"ATTENTION: the completion date ({target.isoformat()}) has already passed. "
            "Every key result must be achievable immediately; prioritize quick wins."
        )
    if months_remaining < _SHORT_TERM_MONTHS:
        return (
            f"DEADLINE: this OKR must be completed in {days_remaining} days (less than 3 months). "
            "Generate SIMPLE, direct key results that are achievable in the short term (weeks). "
            "Prioritize quick, low-complexity results."
        )
    if months_remaining <= _MID_TERM_MONTHS:
        return (
            f"DEADLINE: this OKR must be completed in {days_remaining} days "
            f"(about {months_remaining} months). Distribute the key results across the period: "
            "some in the first month, others in the middle of the period and some at the end. "
            "MODERATE complexity."
        )
    return (
        f"DEADLINE: this OKR must be completed in {days_remaining} days "
        f"(about {months_remaining} months). Distribute the key results progressively: "
        "initial key results (first month), intermediate ones (middle of the period) and final "
        "ones (last month). Key results may be more complex and ambitious."
    )


# ── Templates ────────────────────────────────────────────────────────────────

_JSON_ONLY = (
    "IMPORTANT: return ONLY valid JSON, without markdown code blocks, "
    "without any text before or after it."
)


def _roadmap_prompt(request: GenerationRequest) -> Tuple[str, PromptContext]:
    days = request.days
    categories, items, ceiling = roadmap_constraints(days)

    time_clause = ""
    if days is not None:
        advice = _LONG_HORIZON_ADVICE
        for max_days, _, _, bucket_advice in _ROADMAP_BUCKETS:
            if days <= max_days:
                advice = bucket_advice
                break
        time_clause = (
            f"CRITICAL DEADLINE: this roadmap MUST be completed in EXACTLY {days} days.\n\n"
            "MANDATORY RULES:\n"
            f"- Create AT MOST {ceiling} items in total (do not exceed this number)\n"
            f"- Spread them over {_fmt(categories)} categories\n"
            f"- Each category must have {_fmt(items)} items\n"
            f"- If you create more than {ceiling} items the roadmap is invalid\n"
            f"- {advice}"
        )

    prompt = f"""You are an expert at building detailed, well-structured study roadmaps.

Create a complete and well-organized roadmap about: "{request.subject}"{_section(time_clause)}

The roadmap must be returned ONLY as valid JSON, with no markdown and no extra text, following EXACTLY this structure:

{{
  "topic": "{request.subject}",
  "roadmap": [
    {{
      "category": "Category name",
      "items": [
        {{"id": "1", "title": "Item title", "completed": false}},
        {{"id": "2", "title": "Item title", "completed": false}}
      ]
    }}
  ]
}}

MANDATORY requirements:
- Create EXACTLY {_fmt(categories)} main categories (no more, no fewer)
- Each category must have between {_fmt(items)} items (respect this range)
- The TOTAL number of items in the whole roadmap MUST NOT EXCEED {ceiling}
- Items must be progressive (from basic to advanced)
- Be specific and practical in the titles
- Organize everything in a logical, sequential order

VALIDATION: a roadmap with more than {ceiling} items in total will be rejected and you will have to generate it again.

{_JSON_ONLY}"""

    context = PromptContext(
        kind=request.kind,
        time_clause=time_clause,
        category_range=categories,
        items_per_category_range=items,
        item_ceiling=ceiling,
        available_days=days,
    )
    return prompt, context


def _topics_prompt(request: GenerationRequest) -> Tuple[str, PromptContext]:
    count = request.effective_count
    prompt = f"""You are an expert at organizing knowledge.

Generate a list of {count} important and relevant topics about: "{request.subject}"

The answer must be ONLY valid JSON, with no markdown and no extra text, following EXACTLY this structure:

{{
  "subject": "{request.subject}",
  "topics": [
    "Topic 1",
    "Topic 2",
    "Topic 3"
  ]
}}

Requirements:
- List practical, specific topics
- Organize them logically
- Keep topic names concise
- Return ONLY the JSON, without additional explanations

{_JSON_ONLY}"""
    return prompt, PromptContext(kind=request.kind, count=count)


def _key_results_prompt(
    request: GenerationRequest,
    today: Optional[date] = None,
) -> Tuple[str, PromptContext]:
    count = request.effective_count
    time_clause = key_results_time_clause(request.completion_date, today=today)
    prompt = f"""You are an expert in OKRs (Objectives and Key Results).

Generate a list of {count} measurable and specific Key Results for the following objective: "{request.subject}"{_section(time_clause)}

Key Results must be:
- Measurable (with clear metrics)
- Specific and actionable
- Aligned with the objective
- Focused on outcomes, not just activities
- Realistic and achievable

The answer must be ONLY valid JSON, with no markdown and no extra text, following EXACTLY this structure:

{{
  "objective": "{request.subject}",
  "key_results": [
    "Key Result 1",
    "Key Result 2",
    "Key Result 3"
  ]
}}

Requirements:
- Each Key Result must be a clear, measurable sentence
- Use specific metrics whenever possible (numbers, percentages, etc.)
- Focus on results that show progress towards the objective
- Be concise but specific
- Return ONLY the JSON, without additional explanations

{_JSON_ONLY}"""
    return prompt, PromptContext(kind=request.kind, time_clause=time_clause, count=count)


def _educational_roadmap_prompt(request: GenerationRequest) -> Tuple[str, PromptContext]:
    prompt = f"""You are an expert at building detailed, well-structured educational roadmaps.

Create a complete and well-organized educational roadmap about: "{request.subject}"

The roadmap must be returned ONLY as valid JSON, with no markdown and no extra text, following EXACTLY this structure:

{{
  "topic": "{request.subject}",
  "books": [
    {{
      "title": "Book title",
      "description": "Book description",
      "author": "Author name",
      "chapters": ["Chapter 1", "Chapter 2", "Chapter 3"],
      "url": "Book URL (if available)"
    }}
  ],
  "courses": [
    {{"title": "Course name", "description": "Course description", "duration": "Estimated duration", "url": "Course URL"}}
  ],
  "videos": [
    {{"title": "Video title", "description": "Video description", "duration": "Video length", "url": "Video URL"}}
  ],
  "articles": [
    {{"title": "Article title", "description": "Article description", "url": "Article URL"}}
  ],
  "projects": [
    {{"title": "Project name", "description": "Playful hands-on project that consolidates the knowledge", "url": "Reference URL (if available)"}}
  ]
}}

Requirements:
- Include 3-5 relevant books with their main chapters
- Include 3-5 online or in-person courses
- Include 5-10 educational videos (YouTube, etc.)
- Include 5-10 technical articles or tutorials
- Include 3-5 practical, playful projects to consolidate the knowledge
- Be specific and practical in the descriptions
- Organize progressively (from basic to advanced)
- Return ONLY the JSON, without additional explanations

{_JSON_ONLY}"""
    return prompt, PromptContext(kind=request.kind)


def _educational_trail_prompt(request: GenerationRequest) -> Tuple[str, PromptContext]:
    days = request.days
    total_days = days if days is not None else _DEFAULT_TRAIL_DAYS
    pace = trail_activities_per_day(days)

    time_clause = ""
    if days is not None:
        if days < 7:
            time_clause = (
                f"LIMITED TIME: this trail must be completed in {days} days. Focus on ESSENTIAL, "
                f"DIRECT content. Prefer quick, practical activities. Fewer activities per day "
                f"({_fmt(pace)}), but well focused."
            )
        elif days <= 14:
            time_clause = (
                f"DEADLINE: this trail must be completed in {days} days. Keep a balanced pace "
                f"with {_fmt(pace)} activities per day."
            )
        else:
            time_clause = (
                f"DEADLINE: this trail must be completed in {days} days. There is enough time for "
                f"deeper content. Include {_fmt(pace)} activities per day and longer materials."
            )

    prompt = f"""Create a {total_days}-day educational trail about: "{request.subject}"{_section(time_clause)}

Return ONLY valid JSON, without markdown:

{{
  "topic": "{request.subject}",
  "total_days": {total_days},
  "description": "Progressive learning trail",
  "resources": {{
    "resource_1": {{"title": "Name", "description": "Desc", "author": "Author", "chapters": ["Ch 1"], "url": ""}},
    "resource_2": {{"title": "Video", "duration": "30 min", "url": ""}}
  }},
  "steps": [
    {{
      "day": 1,
      "title": "Day 1: Title",
      "description": "What will be learned",
      "activities": [
        {{
          "type": "read_chapters",
          "resource_id": "resource_1",
          "title": "Read chapters 1-3",
          "description": "Focus on...",
          "chapters": ["Ch 1", "Ch 2"],
          "progress": "3 of 10 chapters"
        }}
      ]
    }}
  ]
}}

IMPORTANT rules:
- EXACTLY {total_days} days, {_fmt(pace)} activities per day
- The "total_days" field in the JSON MUST be {total_days}
- Types: {", ".join(TRAIL_ACTIVITY_TYPES)}
- Progressive: basic -> advanced -> practice
- Be specific: "Read chapters 1-3", not "Read the book"
- Include progress when relevant
- Projects at the end
- Spread the content proportionally over the {total_days} days

RESOURCE CRITERIA (BOOKS, COURSES, VIDEOS, ARTICLES):
- Use ONLY widely known, established and recognized resources in the field
- Prefer classics, best-sellers and widely used materials
- Avoid very recent, niche or obscure resources that may not exist
- Courses: well-known platforms (Coursera, edX, Udemy) and popular, verified courses
- If you do not know a specific URL, leave the "url" field empty instead of inventing one

ONLY JSON, without markdown."""

    context = PromptContext(
        kind=request.kind,
        time_clause=time_clause,
        item_ceiling=days,
        available_days=days,
        total_days=total_days,
        activities_per_day=pace,
    )
    return prompt, context


def _section(clause: str) -> str:
    return f"\n\n{clause}" if clause else ""


def build_prompt(
    request: GenerationRequest,
    today: Optional[date] = None,
) -> Tuple[str, PromptContext]:
    """
    Build the prompt text and structural context for a request.

    Args:
        request: A validated GenerationRequest
        today:   Reference date for key-results distance (defaults to today)

    Returns:
        (prompt_text, PromptContext)
    """
    if request.kind == ArtifactKind.ROADMAP:
        return _roadmap_prompt(request)
    if request.kind == ArtifactKind.TOPICS:
        return _topics_prompt(request)
    if request.kind == ArtifactKind.KEY_RESULTS:
        return _key_results_prompt(request, today=today)
    if request.kind == ArtifactKind.EDUCATIONAL_ROADMAP:
        return _educational_roadmap_prompt(request)
    if request.kind == ArtifactKind.EDUCATIONAL_TRAIL:
        return _educational_trail_prompt(request)
    raise ValueError(f"Unsupported artifact kind: {request.kind}")
