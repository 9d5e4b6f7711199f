"""
Tests for the catalog management utility.
"""

import manage_db
from catalog.database import BookRepository, DatabaseManager


def _count_books(url):
    manager = DatabaseManager(url)
    manager.connect()
    try:
        return len(BookRepository(manager.engine).find_all())
    finally:
        manager.disconnect()


def test_usage_without_command(capsys):
    assert manage_db.main([]) == 1
    assert "Usage" in capsys.readouterr().out


def test_unknown_command(capsys):
    assert manage_db.main(["purge"]) == 1
    assert "Unknown command: purge" in capsys.readouterr().out


def test_init_creates_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'books.db'}"
    assert manage_db.main(["init"], database_url=url) == 0
    assert (tmp_path / "books.db").exists()
    assert _count_books(url) == 0


def test_seed_then_list_and_stats(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'books.db'}"

    assert manage_db.main(["seed"], database_url=url) == 0
    assert _count_books(url) == len(manage_db.SAMPLE_BOOKS)

    assert manage_db.main(["list"], database_url=url) == 0
    output = capsys.readouterr().out
    assert "War and Peace" in output

    assert manage_db.main(["stats"], database_url=url) == 0
    output = capsys.readouterr().out
    assert f"Total Books: {len(manage_db.SAMPLE_BOOKS)}" in output
    assert "SciFi: 2" in output


def test_list_empty_database(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'books.db'}"
    assert manage_db.main(["list"], database_url=url) == 0
    assert "No books found" in capsys.readouterr().out


def test_connection_failure_is_reported(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'missing' / 'books.db'}"
    assert manage_db.main(["list"], database_url=url) == 1
    assert "Error running 'list'" in capsys.readouterr().out
