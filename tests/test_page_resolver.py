import pytest

from app.utils.page_repository import PageRepository
from app.utils.page_resolver import PageResolver, path_to_slug
from tests.helpers import FakeClock, FakePageStore, sample_row


@pytest.fixture
def store():
    main = sample_row()
    sub = sample_row('sub-1', 'Gdansk', '/gdansk', created_at=2)
    sub['seo_title'] = None
    sub['seo_description'] = ''
    return FakePageStore([main, sub])


@pytest.fixture
def resolver(store):
    repo = PageRepository(store, clock=FakeClock())
    return PageResolver(repo, 'Fotobudka Chojnice - OG Events', 'Wynajem fotobudki')


@pytest.mark.parametrize('path, slug', [
    ('', '/'),
    ('/', '/'),
    ('gdansk', '/gdansk'),
    ('gdansk/', '/gdansk'),
    ('/gdansk', '/gdansk'),
    ('pomorze/gdansk', '/pomorze/gdansk'),
])
def test_path_to_slug(path, slug):
    assert path_to_slug(path) == slug


def test_resolve_keeps_page_seo(resolver):
    page = resolver.resolve('/')
    assert page['seo'] == {'title': 'Fotobudka Chojnice', 'description': 'Fotobudka na wesela'}


def test_resolve_fills_empty_seo(resolver):
    page = resolver.resolve_path('gdansk/')
    assert page['name'] == 'Gdansk'
    assert page['seo'] == {'title': 'Fotobudka Chojnice - OG Events', 'description': 'Wynajem fotobudki'}


def test_defaults_do_not_leak_into_repository(resolver):
    resolver.resolve('/gdansk')
    assert resolver.repository.get_by_slug('/gdansk')['seo']['title'] == ''


def test_unknown_slug_resolves_to_none(resolver):
    assert resolver.resolve('/nonexistent') is None


def test_storage_failure_resolves_to_none(resolver, store):
    store.fail = True
    assert resolver.resolve('/') is None
