"""
Ranking module.
Orders films by how many users liked them.
"""

from typing import Dict, List

from loguru import logger

from .models import Film

# Number of films returned when the caller gives no usable count
DEFAULT_POPULAR_COUNT = 10


class PopularityRanker:
	"""
	Ranks films by descending like count.
	Ties keep their order from the catalog enumeration (the sort is stable and has
	no secondary key), so among equally liked films the earlier-created one wins.
	"""

	def __init__(self, default_count: int = DEFAULT_POPULAR_COUNT):
		self.default_count = default_count

	def resolve_count(self, count) -> int:
		"""Fall back to the default when count is missing or not positive."""
		if count is None or count <= 0:
			return self.default_count
		return count

	def top(self, films: List[Film], like_counts: Dict[int, int], count=None) -> List[Film]:
		"""Return at most `count` films, most liked first."""
		limit = self.resolve_count(count)
		ranked = sorted(films, key=lambda f: like_counts.get(f.id, 0), reverse=True)
		logger.debug(f"[Ranking] Ranked {len(ranked)} films, returning top {min(limit, len(ranked))}")
		return ranked[:limit]
