"""Commands of the DB Browser CLI."""
