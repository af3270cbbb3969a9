"""
Response composition: page truncation, summary and the single follow-up question.
"""

from typing import List, Optional

from .models import Analysis, Candidate, ChatResponse, FilterContext

FOLLOWUP_YEAR = 'Want a specific year or era? Examples: "this year", "after 2015", "before 2000".'
FOLLOWUP_RATING = 'Set a minimum rating? e.g., "7+", "8+".'
FOLLOWUP_LANGUAGE = 'Prefer a language? e.g., "Korean", "German", "English".'
FOLLOWUP_PERSON = 'Any favorite actor or director to prioritize?'


def choose_followup(ctx: FilterContext) -> Optional[str]:
	"""First unset slot wins: year, then rating, then language, then actor/director."""
	if not ctx.has_year_constraint():
		return FOLLOWUP_YEAR
	if not ctx.min_rating:
		return FOLLOWUP_RATING
	if not ctx.language:
		return FOLLOWUP_LANGUAGE
	if not ctx.actor and not ctx.director:
		return FOLLOWUP_PERSON
	return None


def default_summary(count: int) -> str:
	if not count:
		return 'No results found. Try adding a genre or year.'
	return f"Done. Found {count} results."


def compose(analysis: Analysis, ranked: List[Candidate], page_size: int) -> ChatResponse:
	results = ranked[:page_size]
	return ChatResponse(
		summary=analysis.summary or default_summary(len(results)),
		context=analysis.context,
		results=results,
		followup=choose_followup(analysis.context),
	)
