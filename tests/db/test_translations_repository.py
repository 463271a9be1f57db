"""Tests for the translations repository."""

import pytest

from verbario.core.errors import Forbidden, NotFound, ValidationError


def _pair(word: str, english: str = "en", hungarian: str = "hu", **extra) -> dict:
    return {"word": word, "translations": {"english": english, "hungarian": hungarian}, **extra}


class TestCreateTranslation:
    """Tests for TranslationRepository.create."""

    def test_create_defaults_memorized_false(self, translation_repo):
        """New translations start unmemorized."""
        t = translation_repo.create(_pair("perro", "dog", "kutya"), "secret")
        assert t.id
        assert t.memorized is False
        assert t.to_dict()["translations"] == {"english": "dog", "hungarian": "kutya"}

    def test_padded_secret_accepted(self, translation_repo):
        """Whitespace around the secret is ignored."""
        t = translation_repo.create(_pair("gato"), " secret ")
        assert t.word == "gato"

    def test_wrong_secret_forbidden(self, translation_repo):
        """A mismatched secret is refused."""
        with pytest.raises(Forbidden):
            translation_repo.create(_pair("gato"), "secret2")

    def test_empty_secret_forbidden(self, translation_repo):
        """Missing or blank secrets are refused."""
        for supplied in (None, "", "   "):
            with pytest.raises(Forbidden):
                translation_repo.create(_pair("gato"), supplied)

    def test_forbidden_checked_before_validation(self, translation_repo):
        """The secret is checked before the body."""
        with pytest.raises(Forbidden):
            translation_repo.create({}, "wrong")

    def test_missing_fields_rejected(self, translation_repo):
        """Word and both translations are required."""
        with pytest.raises(ValidationError):
            translation_repo.create({"word": "gato"}, "secret")
        with pytest.raises(ValidationError):
            translation_repo.create(
                {"word": "gato", "translations": {"english": "cat"}}, "secret"
            )

    def test_non_boolean_memorized_rejected(self, translation_repo):
        """memorized must be a real boolean."""
        with pytest.raises(ValidationError):
            translation_repo.create(_pair("gato", memorized="yes"), "secret")

    def test_wrong_secret_with_malformed_fields_forbidden(self, translation_repo):
        """Field type errors never mask a wrong secret."""
        with pytest.raises(Forbidden):
            translation_repo.create({"translations": "x", "memorized": 1}, "wrong")

    def test_duplicate_words_allowed(self, translation_repo):
        """Translation words need not be unique."""
        translation_repo.create(_pair("banco", "bank"), "secret")
        translation_repo.create(_pair("banco", "bench"), "secret")
        assert translation_repo.list().total == 2


class TestListTranslations:
    """Tests for TranslationRepository.list."""

    def test_list_sorted_and_filtered(self, translation_repo):
        """Listing is ordered by word and filtered by substring."""
        for word in ["perro", "gato", "Pez", "caballo"]:
            translation_repo.create(_pair(word), "secret")

        assert [t.word for t in translation_repo.list().items] == [
            "Pez",
            "caballo",
            "gato",
            "perro",
        ]
        filtered = translation_repo.list(q="pe")
        assert [t.word for t in filtered.items] == ["Pez", "perro"]
        assert filtered.total == 2

    def test_list_pagination(self, translation_repo):
        """Second page of five holds items six to ten."""
        for i in range(12):
            translation_repo.create(_pair(f"palabra{i:02d}"), "secret")
        page = translation_repo.list(page=2, limit=5)
        assert [t.word for t in page.items] == [f"palabra{i:02d}" for i in range(5, 10)]
        assert page.total == 12

    def test_duplicate_words_page_by_id(self, translation_repo):
        """Equal words are ordered by id, so pages never overlap."""
        created = [translation_repo.create(_pair("banco", f"en{i}"), "secret") for i in range(4)]
        expected = sorted(t.id for t in created)

        first = translation_repo.list(page=1, limit=2).items
        second = translation_repo.list(page=2, limit=2).items
        assert [t.id for t in first + second] == expected


class TestRandomSample:
    """Tests for TranslationRepository.random_sample."""

    def test_sample_smaller_pool_returns_whole_pool(self, translation_repo):
        """A count above the pool size returns the whole pool once."""
        created = [translation_repo.create(_pair(w), "secret") for w in ["uno", "dos", "tres"]]
        translation_repo.create(_pair("cuatro", memorized=True), "secret")

        sample = translation_repo.random_sample(10)
        ids = [t.id for t in sample]
        assert len(ids) == len(set(ids))
        assert set(ids) == {t.id for t in created}

    def test_sample_respects_count(self, translation_repo):
        """Sample size equals count when the pool is larger."""
        for i in range(8):
            translation_repo.create(_pair(f"w{i}"), "secret")
        sample = translation_repo.random_sample(3)
        assert len(sample) == 3
        assert len({t.id for t in sample}) == 3
        assert all(not t.memorized for t in sample)

    def test_sample_zero(self, translation_repo):
        """A count of zero returns nothing."""
        translation_repo.create(_pair("uno"), "secret")
        assert translation_repo.random_sample(0) == []

    def test_sample_excludes_memorized(self, translation_repo):
        """Memorized translations are never sampled."""
        translation_repo.create(_pair("uno", memorized=True), "secret")
        assert translation_repo.random_sample(5) == []

    def test_sample_negative_rejected(self, translation_repo):
        """A negative count is rejected."""
        with pytest.raises(ValidationError):
            translation_repo.random_sample(-1)


class TestUpdateDeleteTranslation:
    """Tests for update and delete, including secret precedence."""

    def test_update_merges_fields(self, translation_repo):
        """Translation fields are merged per key."""
        t = translation_repo.create(_pair("perro", "dog", "kutya"), "secret")
        updated = translation_repo.update(
            t.id, {"translations": {"english": "hound"}, "memorized": True}, "secret"
        )
        assert updated.english == "hound"
        assert updated.hungarian == "kutya"
        assert updated.memorized is True
        assert translation_repo.get_by_id(t.id).english == "hound"

    def test_update_wrong_secret_on_missing_id_is_forbidden(self, translation_repo):
        """Forbidden precedes NotFound."""
        with pytest.raises(Forbidden):
            translation_repo.update("does-not-exist", {"word": "x"}, "secret2")

    def test_update_missing_id_with_secret_is_not_found(self, translation_repo):
        """With the right secret an unknown id is NotFound."""
        with pytest.raises(NotFound):
            translation_repo.update("does-not-exist", {"word": "x"}, "secret")

    def test_delete(self, translation_repo):
        """Deleted record can no longer be fetched."""
        t = translation_repo.create(_pair("perro"), "secret")
        translation_repo.delete(t.id, "secret")
        with pytest.raises(NotFound):
            translation_repo.get_by_id(t.id)

    def test_delete_wrong_secret_on_missing_id_is_forbidden(self, translation_repo):
        """Forbidden precedes NotFound on delete."""
        with pytest.raises(Forbidden):
            translation_repo.delete("does-not-exist", "secret2")

    def test_delete_wrong_secret_keeps_record(self, translation_repo):
        """A refused delete leaves the record in place."""
        t = translation_repo.create(_pair("perro"), "secret")
        with pytest.raises(Forbidden):
            translation_repo.delete(t.id, "nope")
        assert translation_repo.get_by_id(t.id).word == "perro"

    def test_delete_missing_id_with_secret_is_not_found(self, translation_repo):
        """With the right secret an unknown id is NotFound."""
        with pytest.raises(NotFound):
            translation_repo.delete("does-not-exist", "secret")
