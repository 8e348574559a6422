"""Integration tests для Post / Term / table models against SQLite."""

import pytest

from wpmodel import Collection, Model, Post, Term

pytestmark = pytest.mark.integration


class Abc(Post):
    object_type = "abc"


class Page(Post):
    object_type = "page"


class Genre(Term):
    object_type = "genre"


class TermRow(Model):
    """Plain table model over wp_terms."""

    table = "terms"
    primary_key = "term_id"
    object_type = "term_row"


class TestPostModel:
    """Tests для Post models."""

    def test_save_inserts_with_object_type(self, wordpress):
        """Test: new model saved as post type "abc"."""
        # Arrange
        post = Abc({"post_title": "Hello"})

        # Act
        saved = post.save()

        # Assert
        assert saved is True
        assert post.exists is True
        assert post.recently_created is True
        assert wordpress.posts.get_post_type(post.get_id()) == "abc"

    def test_update_dirty_attributes(self, wordpress):
        """Test: changed post_type is written on save."""
        # Arrange
        post = Abc({"post_title": "Hello"})
        post.save()

        # Act
        post.post_type = "ddd"
        saved = post.save()

        # Assert
        assert saved is True
        assert post.was_changed("post_type") is True
        assert wordpress.posts.get_post_type(post.get_id()) == "ddd"

    def test_find_hydrates_clean_model(self, wordpress):
        """Test: find() → existing, clean model; other post types → None."""
        # Arrange
        own = Abc({"post_title": "Own"})
        own.save()
        page_id = wordpress.posts.insert_post({"post_title": "Page", "post_type": "page"})

        # Act
        found = Abc.find(own.get_id())

        # Assert
        assert found.post_title == "Own"
        assert found.exists is True
        assert found.is_clean() is True
        assert Abc.find(page_id) is None
        assert Abc.find(999) is None

    def test_trash_then_force_delete(self, wordpress):
        """Test: delete() → trash, delete(True) → removed from the database."""
        # Arrange
        post = Abc({"post_title": "Hello", "post_status": "publish"})
        post.save()
        post_id = post.get_id()

        # Act & Assert
        assert post.delete() is True
        assert post.exists is False
        assert wordpress.posts.get_post_status(post_id) == "trash"

        trashed = Abc.find(post_id)
        assert trashed.is_trashed is True
        assert trashed.delete(True) is True
        assert wordpress.posts.post_exists(post_id) is False

    def test_delete_without_trash(self, no_trash, wordpress):
        """Test: trash disabled → delete() removes the post."""
        post = Abc({"post_title": "Hello"})
        post.save()

        assert post.delete() is True
        assert wordpress.posts.post_exists(post.get_id()) is False

    def test_query_builder(self, wordpress):
        """Test: status / orderby / limit через Builder."""
        # Arrange
        for index, status in enumerate(("publish", "publish", "draft", "publish")):
            Page({"post_title": f"Page {index}", "post_status": status, "menu_order": index}).save()
        Abc({"post_title": "Other", "post_status": "publish"}).save()

        # Act
        published = Page.query().orderby("menu_order", "ASC").get()
        limited = Page.query().status("any").orderby("ID", "ASC").limit(2).get()
        first = Page.orderby("menu_order", "DESC").first()

        # Assert
        assert isinstance(published, Collection)
        assert published.pluck("post_title") == ["Page 0", "Page 1", "Page 3"]
        assert limited.pluck("post_title") == ["Page 0", "Page 1"]
        assert first.post_title == "Page 3"

    def test_all_and_query_vars(self, wordpress):
        """Test: all() returns published posts of the type, query(vars) filters."""
        Page({"post_title": "A", "post_status": "publish"}).save()
        Page({"post_title": "B", "post_status": "draft"}).save()

        assert Page.all().pluck("post_title") == ["A"]
        assert Page.query({"status": "draft"}).get().pluck("post_title") == ["B"]

    def test_select_ids(self, wordpress):
        """Test: select("ids") hydrates models with only the key."""
        page = Page({"post_title": "A", "post_status": "publish"})
        page.save()

        models = Page.query().select("ids").get()

        assert [model.get_attributes() for model in models] == [{"ID": page.get_id()}]

    def test_destroy(self, wordpress):
        """Test: destroy() force-deletes by IDs."""
        first = Abc({"post_title": "A"})
        second = Abc({"post_title": "B"})
        first.save()
        second.save()

        assert Abc.destroy(first.get_id(), second.get_id(), 999) == 2
        assert wordpress.posts.post_exists(first.get_id()) is False


class TestTermModel:
    """Tests для Term models."""

    def test_save_and_find(self, wordpress):
        """Test: insert via insert_term, find via get_term."""
        # Arrange
        genre = Genre({"name": "Drama", "description": "Serious"})

        # Act
        saved = genre.save()
        found = Genre.find(genre.get_id())

        # Assert
        assert saved is True
        assert genre.term_id == 1
        assert found.name == "Drama"
        assert found.taxonomy == "genre"

    def test_save_without_name_fails(self, wordpress):
        """Test: insert without "name" → save() False."""
        genre = Genre({"description": "No name"})

        assert genre.save() is False
        assert genre.exists is False

    def test_update_and_delete(self, wordpress):
        """Test: update name, then delete the term."""
        # Arrange
        genre = Genre({"name": "Drama"})
        genre.save()

        # Act
        genre.name = "Tragedy"
        updated = genre.save()
        deleted = genre.delete()

        # Assert
        assert updated is True
        assert deleted is True
        assert wordpress.terms.get_term(genre.get_id()) is None

    def test_query_includes_empty_terms(self, wordpress):
        """Test: Term.query() does not hide terms without posts."""
        for name in ("Drama", "Action"):
            Genre({"name": name}).save()

        assert Genre.all().pluck("name") == ["Action", "Drama"]
        assert Genre.query().limit(1).get().pluck("name") == ["Action"]


class TestTableModel:
    """Tests для models over plain tables (DBQuery)."""

    def test_crud(self, database):
        """Test: insert, find, update, delete через DBQuery."""
        # Arrange
        row = TermRow({"name": "Drama", "slug": "drama"})

        # Act & Assert
        assert row.save() is True
        assert row.term_id == 1

        found = TermRow.find(1)
        assert found.slug == "drama"

        found.slug = "tragedy"
        assert found.save() is True
        assert database.table("terms").where("term_id", 1).first()["slug"] == "tragedy"

        assert found.delete() is True
        assert TermRow.find(1) is None

    def test_where_through_builder(self, database):
        """Test: Builder.where() reaches the SQL builder."""
        for name in ("Drama", "Action", "Comedy"):
            TermRow({"name": name, "slug": name.lower()}).save()

        rows = TermRow.where("slug", "!=", "action").orderby("name", "asc").get()

        assert rows.pluck("name") == ["Comedy", "Drama"]

    def test_query_vars_become_wheres(self, database):
        """Test: TermRow.query({"slug": ...}) filters by equality."""
        TermRow({"name": "Drama", "slug": "drama"}).save()
        TermRow({"name": "Action", "slug": "action"}).save()

        assert TermRow.query({"slug": "action"}).get().pluck("name") == ["Action"]
