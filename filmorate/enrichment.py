"""
Enrichment pass run on reads.
Films whose classification or genres carry an id but no name get the name filled in
from the classification catalogs. Best effort: a reference that no longer resolves
is left as it is and the read still succeeds.
"""

import dataclasses  # copy-on-write replacement of film fields
from typing import List

from loguru import logger

from .classifications import GenreCatalog, MpaCatalog
from .models import Film, Genre


def _is_nameless(name) -> bool:
	return name is None or not str(name).strip()


class Enricher:
	def __init__(self, mpa: MpaCatalog, genres: GenreCatalog):
		self.mpa = mpa
		self.genres = genres

	def enrich_film(self, film: Film) -> Film:
		"""Return the film with classification names filled in. The input is not modified."""
		mpa = film.mpa
		if mpa is not None and mpa.id is not None and _is_nameless(mpa.name):
			found = self.mpa.find_by_id(mpa.id)
			if found is not None:
				mpa = found
			else:
				logger.debug(f"[Enrichment] Film {film.id}: mpa id={mpa.id} no longer resolves; left as is")

		genres: List[Genre] = []
		for genre in film.genres or []:
			if genre.id is not None and _is_nameless(genre.name):
				found = self.genres.find_by_id(genre.id)
				if found is None:
					logger.debug(f"[Enrichment] Film {film.id}: genre id={genre.id} no longer resolves; left as is")
				genres.append(found or genre)
			else:
				genres.append(genre)

		return dataclasses.replace(film, mpa=mpa, genres=genres)

	def enrich_films(self, films: List[Film]) -> List[Film]:
		return [self.enrich_film(f) for f in films]
