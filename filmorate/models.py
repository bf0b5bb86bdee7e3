"""
Data models for Filmorate.
Defines the records kept by the catalogs and returned to callers.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, __eq__
# Import typing helpers for precise and self-documenting types
from typing import List, Optional  # lists and optional values
# Dates for release dates and birthdays
from datetime import date  # calendar dates without time


@dataclass
class Mpa:
	"""
	Content-rating classification attached to every film (G, PG, PG-13, ...).
	A reference may arrive with only the id set; the name is filled in from the catalog.
	"""
	id: int  # classification identifier
	name: Optional[str] = None  # descriptive name, e.g. "PG-13"


@dataclass
class Genre:
	"""Descriptive tag attached to a film. A film may carry several."""
	id: int  # genre identifier
	name: Optional[str] = None  # descriptive name, e.g. "Comedy"


@dataclass
class User:
	"""
	A person who can befriend other users and like films.
	`id` is assigned by the catalog on creation and never changes afterwards.
	"""
	email: Optional[str] = None  # must be non-blank and contain "@"
	login: Optional[str] = None  # non-blank, no whitespace
	name: Optional[str] = None  # display name, defaults to login when blank
	birthday: Optional[date] = None  # not in the future
	id: Optional[int] = None  # allocator-assigned identifier


@dataclass
class Film:
	"""
	A film record. `mpa` and `genres` are references into the classification catalogs;
	stored records always carry resolved names.
	"""
	name: Optional[str] = None  # non-blank title
	description: Optional[str] = None  # optional, at most 200 characters
	release_date: Optional[date] = None  # not before 1895-12-28
	duration: Optional[int] = None  # positive length in minutes
	mpa: Optional[Mpa] = None  # exactly one classification, defaulted when omitted
	genres: List[Genre] = field(default_factory=list)  # unique by id, first-insertion order
	id: Optional[int] = None  # allocator-assigned identifier
