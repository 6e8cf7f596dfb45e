"""dbmeta - round-trip Firebird schemas between a live database and DDL scripts."""

__version__ = "0.1.0"
