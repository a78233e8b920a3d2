import pytest

from app import db
from app.models.page import page_data_to_db_row
from app.utils.page_repository import PageRepository
from app.utils.page_store import SqlPageStore, StorageError
from tests.helpers import sample_page_data


@pytest.fixture
def store(app, main_page):
    with app.app_context():
        yield SqlPageStore(db)


def test_select_all_puts_main_page_first(store):
    store.insert(page_data_to_db_row(sample_page_data('sub-1', 'Gdansk', '/gdansk')))
    store.insert(page_data_to_db_row(sample_page_data('sub-2', 'Sopot', '/sopot')))

    rows = store.select_all()
    assert [row['slug'] for row in rows] == ['/', '/gdansk', '/sopot']
    assert rows[0]['is_main'] is True
    assert rows[0]['gallery']['images'][0]['src'] == '/a.webp'


def test_insert_generates_id_when_missing(store):
    row = page_data_to_db_row(sample_page_data(None, 'Sopot', '/sopot'))
    stored = store.insert(row)

    assert stored['id']
    assert stored['is_main'] is False
    assert stored['created_at'] is not None


def test_update_overwrites_columns(store, main_page):
    row = page_data_to_db_row(main_page)
    row['welcome_section'] = {'welcomeText': 'Nowy tekst', 'subtitle': ''}

    assert store.update(main_page['id'], row) == 1
    stored = store.select_all()[0]
    assert stored['welcome_section'] == {'welcomeText': 'Nowy tekst', 'subtitle': ''}


def test_update_unknown_id_changes_nothing(store):
    row = page_data_to_db_row(sample_page_data('missing', 'X', '/x'))
    assert store.update('missing', row) == 0


def test_delete_never_removes_main_page(store, main_page):
    assert store.delete(main_page['id']) == 0
    assert len(store.select_all()) == 1


def test_delete_subpage(store):
    store.insert(page_data_to_db_row(sample_page_data('sub-1', 'Gdansk', '/gdansk')))
    assert store.delete('sub-1') == 1
    assert [row['slug'] for row in store.select_all()] == ['/']


def test_duplicate_slug_raises_storage_error(store):
    with pytest.raises(StorageError):
        store.insert(page_data_to_db_row(sample_page_data('dup', 'Druga główna', '/')))

    # session is usable again after the rollback
    assert len(store.select_all()) == 1


def test_repository_over_database(store, main_page):
    repo = PageRepository(store)

    page = repo.add_subpage('Gdańsk', '/gdansk')
    assert page is not None
    assert page['gallery'] == main_page['gallery']

    page['locations']['cities'] = ['Gdansk', 'Gdynia']
    assert repo.update(page['id'], page) is True
    assert repo.get_by_slug('/gdansk')['locations']['cities'] == ['Gdansk', 'Gdynia']
    assert repo.get_main_page()['locations']['cities'] == ['Chojnice', 'Gdansk', 'Sopot']

    assert repo.remove_subpage(main_page['id']) is False
    assert repo.remove_subpage(page['id']) is True
    assert [p['slug'] for p in repo.load_all()] == ['/']
