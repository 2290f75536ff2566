"""Unit tests for the snapshot differ."""

from src.etl.sync.differ import Differ, DiffResult, diff_films
from tests.conftest import make_film


def _index(*films):
    return {f.id: f for f in films}


class TestDiffResult:
    @staticmethod
    def test_empty_has_no_changes() -> None:
        assert DiffResult().has_changes is False

    @staticmethod
    def test_to_changes_counts() -> None:
        result = DiffResult(added=[make_film(id=1)], removed=[2, 3], modified=[], unchanged_count=4)
        assert result.to_changes() == {"added": 1, "removed": 2, "modified": 0}
        assert result.has_changes is True


class TestDiffer:
    @staticmethod
    def test_first_run_everything_added() -> None:
        new = [make_film(id=1), make_film(id=2)]
        result = Differ().diff({}, new)
        assert [f.id for f in result.added] == [1, 2]
        assert result.removed == []
        assert result.modified == []

    @staticmethod
    def test_identical_catalog_no_changes() -> None:
        films = [make_film(id=1), make_film(id=2)]
        result = Differ().diff(_index(*films), films)
        assert result.has_changes is False
        assert result.unchanged_count == 2

    @staticmethod
    def test_added_and_removed() -> None:
        old = _index(make_film(id=1), make_film(id=2))
        new = [make_film(id=2), make_film(id=3)]
        result = Differ().diff(old, new)
        assert result.added_ids == {3}
        assert result.removed == [1]
        assert result.modified == []
        assert result.unchanged_count == 1

    @staticmethod
    def test_new_country_is_modification() -> None:
        old = _index(make_film(id=1, available_countries=["PT"]))
        new = [make_film(id=1, available_countries=["PT", "DE"])]
        result = Differ().diff(old, new)
        assert result.modified_ids == {1}
        assert result.added == []

    @staticmethod
    def test_reordered_lists_unchanged() -> None:
        old = _index(make_film(id=1, genres=["Drama", "Romance"], available_countries=["PT", "DE"]))
        new = [make_film(id=1, genres=["Romance", "Drama"], available_countries=["DE", "PT"])]
        result = Differ().diff(old, new)
        assert result.has_changes is False

    @staticmethod
    def test_popularity_change_unchanged() -> None:
        old = _index(make_film(id=1, popularity=10.0))
        result = Differ().diff(old, [make_film(id=1, popularity=80.0)])
        assert result.has_changes is False

    @staticmethod
    def test_partition_covers_both_sides() -> None:
        old = _index(*(make_film(id=i) for i in range(1, 6)))
        new = [make_film(id=i, title="Changed" if i == 4 else "Aftersun") for i in range(3, 9)]
        result = Differ().diff(old, new)

        new_ids = {f.id for f in new}
        classified = result.added_ids | result.modified_ids
        assert result.added_ids.isdisjoint(result.modified_ids)
        assert len(classified) + result.unchanged_count == len(new_ids)
        assert set(result.removed) == set(old) - new_ids
        assert result.modified_ids == {4}

    @staticmethod
    def test_removed_keeps_snapshot_order() -> None:
        old = _index(make_film(id=9), make_film(id=3), make_film(id=7))
        result = Differ().diff(old, [])
        assert result.removed == [9, 3, 7]

    @staticmethod
    def test_idempotent() -> None:
        old = _index(make_film(id=1), make_film(id=2, year=1990))
        new = [make_film(id=2), make_film(id=3)]
        first = diff_films(old, new)
        second = diff_films(old, new)
        assert first == second
