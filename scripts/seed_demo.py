"""
Load fixtures into a fresh in-memory Filmorate and print what was built.

This script:
1) Wires the services
2) Applies users, films, friendships and likes from a JSONL file
3) Prints the most popular films and each user's friends

Usage:
    python -m scripts.seed_demo [path/to/fixtures.jsonl]

Defaults to data/seed.jsonl.
"""

import sys  # command-line argument
import time  # measure step timings
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from filmorate.config import get_settings  # business-rule settings
from filmorate.data_loader import DataLoader  # fixture ingestion
from filmorate.services import build_services  # component wiring


def main():
	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Filmorate fixture demo")
	logger.info("=" * 60)

	# Resolve fixture path
	root = Path(__file__).resolve().parents[1]  # project root
	data_path = Path(sys.argv[1]) if len(sys.argv) > 1 else root / 'data' / 'seed.jsonl'

	# 1) Wire services
	logger.info("[1/3] Wiring services...")
	settings = get_settings()
	services = build_services(
		default_popular_count=settings.default_popular_count,
		default_mpa_id=settings.default_mpa_id,
		min_release_date=settings.min_release_date,
		max_description_length=settings.max_description_length,
	)

	# 2) Load fixtures
	logger.info(f"[2/3] Loading fixtures from {data_path}...")
	t0 = time.time()
	summary = DataLoader(services).load_from_jsonl(str(data_path))
	logger.info(f"[OK] Loaded in {time.time() - t0:.3f}s; skipped lines: {summary.skipped or 'none'}")

	# 3) Report
	logger.info("[3/3] Popular films:")
	for i, film in enumerate(services.films.popular_films(), 1):
		genres = ', '.join(g.name or str(g.id) for g in film.genres)
		logger.info(
			f"  {i}. {film.name} ({film.release_date.year}) [{film.mpa.name}] "
			f"likes={services.films.like_count(film.id)} genres={genres or '-'}"
		)
	for user in services.users.list_users():
		friends = ', '.join(f.name for f in services.users.friends_of(user.id))
		logger.info(f"  {user.name} ({user.login}) friends: {friends or '-'}")

	logger.info("=" * 60)


if __name__ == '__main__':
	main()
